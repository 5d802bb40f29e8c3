"""Sample geometries shared by the test modules."""

POINT = {"type": "Point", "coordinates": [1.0, 2.0]}

LINE_STRING = {"type": "LineString", "coordinates": [[0, 0], [1, 1], [2, 0]]}

POLYGON = {
    "type": "Polygon",
    "coordinates": [
        [[0, 0], [4, 0], [4, 4], [0, 4], [0, 0]],
        [[1, 1], [2, 1], [2, 2], [1, 1]],
    ],
}

MULTI_POINT = {"type": "MultiPoint", "coordinates": [[0, 0], [5, 5]]}

MULTI_LINE_STRING = {
    "type": "MultiLineString",
    "coordinates": [
        [[0, 0], [1, 0]],
        [[2, 2], [3, 3], [4, 4]],
    ],
}

MULTI_POLYGON = {
    "type": "MultiPolygon",
    "coordinates": [
        [[[0, 0], [1, 0], [1, 1], [0, 0]]],
        [[[5, 5], [6, 5], [6, 6], [5, 6], [5, 5]]],
    ],
}


def feature(geometry, **properties):
    return {"type": "Feature", "geometry": geometry, "properties": properties}
