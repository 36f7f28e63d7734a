from datetime import date, datetime, timezone

import pytest

from stac_fastapi.cql2 import (
    Cql2JsonParser,
    InvalidArgumentShape,
    InvalidArity,
    InvalidGeometry,
    InvalidTimeFormat,
    MalformedInput,
    MissingOperator,
    ParseError,
    UnsupportedOperator,
    nodes,
    parse_cql2_json,
)


def test_parse_between(parser):
    node = parser.parse(b'{"op":"between","args":[{"property":"temp"},1,30]}')

    assert node == nodes.Between(
        subject=nodes.Property("temp"),
        lower=nodes.Literal(1),
        upper=nodes.Literal(30),
    )


def test_parse_between_wrong_arity(parser):
    with pytest.raises(InvalidArity) as exc_info:
        parser.parse('{"op":"between","args":[{"property":"temp"},1,2,3]}')

    assert exc_info.value.op == "between"
    assert exc_info.value.expected == 3
    assert exc_info.value.got == 4


def test_parse_malformed_json(parser):
    with pytest.raises(MalformedInput):
        parser.parse("this is not json")


def test_parse_property_to_property_comparison(parser):
    node = parser.parse({"op": "=", "args": [{"property": "a"}, {"property": "b"}]})

    assert node == nodes.Comparison(
        op="=", left=nodes.Property("a"), right=nodes.Property("b")
    )
    assert node.is_property_comparison


def test_parse_property_to_literal_comparison(parser):
    node = parser.parse({"op": "<", "args": [{"property": "eo:cloud_cover"}, 10]})

    assert node.op == nodes.ComparisonOp.LT
    assert node.right == nodes.Literal(10)
    assert not node.is_property_comparison


@pytest.mark.parametrize(
    "value, kind",
    (
        ("published", nodes.LiteralKind.STRING),
        (10, nodes.LiteralKind.NUMBER),
        (2.5, nodes.LiteralKind.NUMBER),
        (True, nodes.LiteralKind.BOOLEAN),
    ),
)
def test_parse_literal_kinds(parser, value, kind):
    node = parser.parse({"op": "=", "args": [{"property": "p"}, value]})
    assert node.right.kind is kind


def test_parse_operator_is_case_insensitive(parser):
    node = parser.parse(
        {
            "op": "AND",
            "args": [
                {"op": "=", "args": [{"property": "a"}, 1]},
                {"op": "IsNull", "args": [{"property": "b"}]},
            ],
        }
    )

    assert isinstance(node, nodes.And)
    assert [child.variant for child in node.children] == ["Comparison", "IsNull"]


def test_parse_logical_keeps_source_order(parser):
    node = parser.parse(
        {
            "op": "or",
            "args": [
                {"op": "=", "args": [{"property": "a"}, 1]},
                {"op": "=", "args": [{"property": "b"}, 2]},
                {"op": "=", "args": [{"property": "c"}, 3]},
            ],
        }
    )

    assert [child.left.name for child in node.children] == ["a", "b", "c"]


def test_parse_empty_and(parser):
    assert parser.parse({"op": "and", "args": []}) == nodes.And(())


def test_parse_not(parser):
    node = parser.parse(
        {"op": "not", "args": [{"op": "isnull", "args": [{"property": "a"}]}]}
    )
    assert node == nodes.Not(nodes.IsNull(nodes.Property("a")))


def test_parse_not_wrong_arity(parser):
    with pytest.raises(InvalidArity):
        parser.parse(
            {
                "op": "not",
                "args": [
                    {"op": "isnull", "args": [{"property": "a"}]},
                    {"op": "isnull", "args": [{"property": "b"}]},
                ],
            }
        )


def test_parse_like(parser):
    node = parser.parse({"op": "like", "args": [{"property": "name"}, "Land%"]})
    assert node == nodes.Like(subject=nodes.Property("name"), pattern="Land%")


def test_parse_like_pattern_must_be_string(parser):
    with pytest.raises(InvalidArgumentShape) as exc_info:
        parser.parse({"op": "like", "args": [{"property": "name"}, 1]})
    assert exc_info.value.op == "like"


def test_parse_in(parser):
    node = parser.parse(
        {"op": "in", "args": [{"property": "collection"}, ["a", {"property": "b"}]]}
    )

    assert node.subject == nodes.Property("collection")
    assert node.values == (nodes.Literal("a"), nodes.Property("b"))


def test_parse_in_values_must_be_array(parser):
    with pytest.raises(InvalidArgumentShape):
        parser.parse({"op": "in", "args": [{"property": "collection"}, "a"]})


def test_parse_spatial_geometry(parser, polygon):
    node = parser.parse(
        {"op": "s_intersects", "args": [{"property": "geometry"}, polygon]}
    )

    assert node.op == nodes.SpatialOp.S_INTERSECTS
    assert node.right == nodes.Geometry(
        type="Polygon", coordinates=polygon["coordinates"]
    )
    assert node.right.to_geojson() == polygon


def test_parse_spatial_bbox(parser):
    node = parser.parse(
        {"op": "s_within", "args": [{"property": "geometry"}, {"bbox": [0, 0, 1, 1]}]}
    )
    assert node.right == nodes.BoundingBox((0, 0, 1, 1))


def test_parse_spatial_geometry_with_bbox_member(parser, polygon):
    geometry = dict(polygon, bbox=[0, 0, 1, 1])
    node = parser.parse(
        {"op": "s_intersects", "args": [{"property": "geometry"}, geometry]}
    )

    assert isinstance(node.right, nodes.Geometry)
    assert node.right.type == "Polygon"
    assert node.right.bbox == (0, 0, 1, 1)
    assert node.right.to_geojson() == geometry


def test_parse_geometry_operand_with_bbox_member(parser):
    point = {"type": "Point", "coordinates": [1, 2], "bbox": [1, 2, 1, 2]}
    node = parser.parse({"op": "=", "args": [{"property": "location"}, point]})

    assert node.right == nodes.Geometry(
        type="Point", coordinates=[1, 2], bbox=[1, 2, 1, 2]
    )


def test_parse_geometry_bbox_member_must_be_array(parser, polygon):
    with pytest.raises(InvalidGeometry):
        parser.parse(
            {
                "op": "s_intersects",
                "args": [{"property": "geometry"}, dict(polygon, bbox="0,0,1,1")],
            }
        )


@pytest.mark.parametrize(
    "shape",
    (
        pytest.param({"type": "Polygon"}, id="missing coordinates"),
        pytest.param({"coordinates": [0, 0]}, id="missing type"),
        pytest.param("POINT(0 0)", id="not an object"),
    ),
)
def test_parse_spatial_invalid_geometry(parser, shape):
    with pytest.raises(InvalidGeometry) as exc_info:
        parser.parse({"op": "s_intersects", "args": [{"property": "geometry"}, shape]})
    assert exc_info.value.op == "s_intersects"


def test_parse_bbox_wrong_size(parser):
    with pytest.raises(InvalidArity):
        parser.parse(
            {"op": "s_intersects", "args": [{"property": "geometry"}, {"bbox": [0, 1]}]}
        )


def test_parse_temporal_interval(parser):
    node = parser.parse(
        {
            "op": "t_intersects",
            "args": [
                {"property": "datetime"},
                {"interval": ["2020-01-01T00:00:00Z", "2020-12-31T23:59:59Z"]},
            ],
        }
    )

    assert node.op == nodes.TemporalOp.T_INTERSECTS
    assert node.right == nodes.Interval(
        start=datetime(2020, 1, 1, tzinfo=timezone.utc),
        end=datetime(2020, 12, 31, 23, 59, 59, tzinfo=timezone.utc),
    )


@pytest.mark.parametrize("open_end", ("..", None))
def test_parse_temporal_open_interval(parser, open_end):
    node = parser.parse(
        {
            "op": "t_intersects",
            "args": [
                {"property": "datetime"},
                {"interval": ["2020-01-01T00:00:00Z", open_end]},
            ],
        }
    )
    assert node.right.start == datetime(2020, 1, 1, tzinfo=timezone.utc)
    assert node.right.end is None


def test_parse_temporal_timestamp_and_date(parser):
    after = parser.parse(
        {
            "op": "t_after",
            "args": [{"property": "datetime"}, {"timestamp": "2020-01-01T00:00:00Z"}],
        }
    )
    before = parser.parse(
        {"op": "t_before", "args": [{"property": "updated"}, {"date": "2021-06-30"}]}
    )

    assert after.right == nodes.Timestamp(datetime(2020, 1, 1, tzinfo=timezone.utc))
    assert before.right == nodes.Date(date(2021, 6, 30))


def test_parse_temporal_invalid_timestamp(parser):
    with pytest.raises(InvalidTimeFormat) as exc_info:
        parser.parse(
            {
                "op": "t_intersects",
                "args": [{"property": "datetime"}, {"interval": ["yesterday", ".."]}],
            }
        )
    assert exc_info.value.op == "t_intersects"


def test_parse_temporal_interval_wrong_size(parser):
    with pytest.raises(InvalidArity):
        parser.parse(
            {
                "op": "t_intersects",
                "args": [
                    {"property": "datetime"},
                    {"interval": ["2020-01-01T00:00:00Z"]},
                ],
            }
        )


def test_parse_temporal_requires_wrapper(parser):
    with pytest.raises(InvalidArgumentShape):
        parser.parse(
            {
                "op": "t_after",
                "args": [{"property": "datetime"}, "2020-01-01T00:00:00Z"],
            }
        )


def test_parse_invalid_date(parser):
    with pytest.raises(InvalidTimeFormat):
        parser.parse({"op": "=", "args": [{"property": "d"}, {"date": "2020-13-01"}]})


def test_parse_array_comparison(parser):
    node = parser.parse(
        {"op": "a_contains", "args": [{"property": "tags"}, ["a", "b"]]}
    )

    assert node.op == nodes.ArrayOp.A_CONTAINS
    assert node.left == nodes.Property("tags")
    assert node.right == nodes.ArrayLiteral((nodes.Literal("a"), nodes.Literal("b")))


def test_parse_array_comparison_rejects_scalars(parser):
    with pytest.raises(InvalidArgumentShape):
        parser.parse({"op": "a_overlaps", "args": [{"property": "tags"}, "a"]})


def test_parse_isnull(parser):
    node = parser.parse({"op": "isnull", "args": [{"property": "platform"}]})
    assert node == nodes.IsNull(nodes.Property("platform"))


def test_parse_casei_function(parser):
    node = parser.parse(
        {
            "op": "=",
            "args": [{"property": "title"}, {"op": "casei", "args": ["Landsat"]}],
        }
    )

    assert node.right == nodes.FunctionCall(
        name="casei", args=[nodes.Literal("Landsat")]
    )
    assert node.right.is_supported


def test_parse_function_arity_is_not_checked(parser):
    node = parser.parse({"op": "accenti", "args": []})
    assert node == nodes.FunctionCall(name="accenti", args=[])


def test_parse_custom_function():
    parser = Cql2JsonParser(functions=["casei", "accenti", "my_fn"])
    node = parser.parse({"op": "my_fn", "args": [{"property": "a"}, 1]})

    assert node == nodes.FunctionCall(
        name="my_fn", args=[nodes.Property("a"), nodes.Literal(1)]
    )
    assert not node.is_supported


def test_parse_unknown_operator(parser):
    with pytest.raises(UnsupportedOperator) as exc_info:
        parser.parse({"op": "my_fn", "args": []})
    assert exc_info.value.op == "my_fn"


@pytest.mark.parametrize(
    "document",
    (
        pytest.param({"args": []}, id="missing op"),
        pytest.param({"op": 1, "args": []}, id="numeric op"),
        pytest.param({"op": None, "args": []}, id="null op"),
    ),
)
def test_parse_missing_operator(parser, document):
    with pytest.raises(MissingOperator):
        parser.parse(document)


@pytest.mark.parametrize(
    "document",
    (
        pytest.param("[1, 2]", id="top level array"),
        pytest.param({"op": "and"}, id="missing args"),
        pytest.param({"op": "and", "args": {"op": "="}}, id="args not array"),
        pytest.param({"op": "and", "args": [1]}, id="child not object"),
        pytest.param({"op": "=", "args": [1, 1]}, id="subject not property"),
        pytest.param({"op": "=", "args": [{"property": ""}, 1]}, id="empty property"),
        pytest.param({"op": "=", "args": [{"property": 1}, 1]}, id="numeric property"),
        pytest.param({"op": "=", "args": [{"property": "a"}, None]}, id="null operand"),
        pytest.param(
            {"op": "=", "args": [{"property": "a"}, {"x": 1}]}, id="unknown object"
        ),
    ),
)
def test_parse_invalid_argument_shape(parser, document):
    with pytest.raises(InvalidArgumentShape):
        parser.parse(document)


def test_parse_error_in_child_aborts_whole_parse(parser):
    with pytest.raises(InvalidArity):
        parser.parse(
            {
                "op": "and",
                "args": [
                    {"op": "=", "args": [{"property": "a"}, 1]},
                    {"op": "or", "args": [{"op": "=", "args": [{"property": "b"}]}]},
                ],
            }
        )


def test_parse_errors_are_value_errors(parser):
    with pytest.raises(ValueError):
        parser.parse("{")
    assert issubclass(MalformedInput, ParseError)


def test_parse_cql2_json_shortcut():
    node = parse_cql2_json('{"op":"=","args":[{"property":"collection"},"landsat"]}')
    assert node == nodes.Comparison(
        op="=", left=nodes.Property("collection"), right=nodes.Literal("landsat")
    )
