from datetime import date, datetime, timezone

import pytest

from stac_fastapi.cql2 import (
    Cql2Builder,
    Cql2TextTranslator,
    NodeVisitor,
    ODataTranslator,
    SQLTranslator,
    TranslateError,
    UnsupportedNodeType,
    nodes,
)
from stac_fastapi.cql2 import expressions as ex
from stac_fastapi.cql2.translators import Translator, to_wkt

POLYGON_JSON = '{"coordinates":[[[0,0],[1,0],[1,1],[0,0]]],"type":"Polygon"}'


class TestODataTranslator:
    translator = ODataTranslator()

    def test_comparison(self):
        assert (
            self.translator.translate(ex.eq("status", "published"))
            == "status eq published"
        )

    @pytest.mark.parametrize(
        "node, expected",
        (
            (ex.eq("a", 1), "a eq 1"),
            (ex.neq("a", 1), "a ne 1"),
            (ex.lt("a", 1), "a lt 1"),
            (ex.lte("a", 1.5), "a le 1.5"),
            (ex.gt("a", 1), "a gt 1"),
            (ex.gte("a", 1), "a ge 1"),
            (ex.eq("flag", True), "flag eq true"),
            (ex.eq("a", ex.prop("b")), "a eq b"),
            (ex.eq("d", date(2020, 1, 1)), "d eq 2020-01-01"),
            (
                ex.gt("datetime", datetime(2020, 1, 1, tzinfo=timezone.utc)),
                "datetime gt 2020-01-01T00:00:00Z",
            ),
        ),
    )
    def test_comparison_operators(self, node, expected):
        assert self.translator.translate(node) == expected

    def test_logical(self):
        node = Cql2Builder().eq("a", 1).eq("b", "x").build()
        assert self.translator.translate(node) == "(a eq 1 and b eq x)"

    def test_nested_logical(self):
        node = ex.or_(ex.eq("a", 1), ex.and_(ex.eq("b", 2), ex.eq("c", 3)))
        assert self.translator.translate(node) == "(a eq 1 or (b eq 2 and c eq 3))"

    def test_not_and_isnull(self):
        assert self.translator.translate(ex.not_(ex.eq("a", 1))) == "not (a eq 1)"
        assert self.translator.translate(ex.is_null("a")) == "a eq null"

    def test_spatial(self, polygon):
        node = ex.s_intersects("geometry", polygon)
        assert self.translator.translate(node) == f"s_intersects({POLYGON_JSON})"

    def test_spatial_bbox(self):
        node = ex.s_within("geometry", [0, 0, 1, 1])
        assert self.translator.translate(node) == 's_within({"bbox":[0,0,1,1]})'

    def test_between_is_unsupported(self):
        with pytest.raises(UnsupportedNodeType) as exc_info:
            self.translator.translate(ex.between("temp", 1, 30))

        assert exc_info.value.variant == "Between"
        assert "Between" in str(exc_info.value)
        assert exc_info.value.dialect == "odata"

    @pytest.mark.parametrize(
        "node, variant",
        (
            (ex.like("name", "a%"), "Like"),
            (ex.in_("a", [1, 2]), "In"),
            (ex.a_contains("tags", ["a"]), "ArrayComparison"),
            (ex.t_after("datetime", "2020-01-01T00:00:00Z"), "TemporalComparison"),
            (ex.eq("title", ex.casei("x")), "FunctionCall"),
        ),
    )
    def test_unsupported_variants(self, node, variant):
        with pytest.raises(UnsupportedNodeType) as exc_info:
            self.translator.translate(node)
        assert exc_info.value.variant == variant

    def test_unsupported_child_fails_whole_translation(self):
        node = ex.and_(ex.eq("a", 1), ex.like("b", "x%"))
        with pytest.raises(TranslateError):
            self.translator.translate(node)


class TestSQLTranslator:
    translator = SQLTranslator()

    def test_comparison(self):
        assert (
            self.translator.translate(ex.eq("status", "published"))
            == "status = 'published'"
        )

    @pytest.mark.parametrize(
        "node, expected",
        (
            (ex.eq("a", 1), "a = '1'"),
            (ex.neq("a", 1), "a <> '1'"),
            (ex.lt("cloud_cover", 10), "cloud_cover < '10'"),
            (ex.lte("a", 1.5), "a <= '1.5'"),
            (ex.gt("a", 1), "a > '1'"),
            (ex.gte("a", 1), "a >= '1'"),
            (ex.eq("flag", False), "flag = 'false'"),
            (ex.eq("a", ex.prop("b")), "a = b"),
            (ex.eq("d", date(2020, 1, 1)), "d = '2020-01-01'"),
        ),
    )
    def test_values_are_quoted(self, node, expected):
        assert self.translator.translate(node) == expected

    def test_logical(self):
        node = ex.and_(ex.eq("a", 1), ex.or_(ex.eq("b", 2), ex.eq("c", 3)))
        assert self.translator.translate(node) == "(a = '1' AND (b = '2' OR c = '3'))"

    def test_not(self):
        assert self.translator.translate(ex.not_(ex.eq("a", 1))) == "NOT (a = '1')"

    def test_advanced_comparisons(self):
        assert (
            self.translator.translate(ex.between("temp", 1, 30))
            == "temp BETWEEN '1' AND '30'"
        )
        assert (
            self.translator.translate(ex.like("name", "Land%")) == "name LIKE 'Land%'"
        )
        assert self.translator.translate(ex.in_("a", [1, "x"])) == "a IN ('1', 'x')"
        assert self.translator.translate(ex.is_null("a")) == "a IS NULL"

    def test_spatial(self, polygon):
        node = ex.s_contains("geometry", polygon)
        assert self.translator.translate(node) == f"s_contains({POLYGON_JSON})"

    def test_temporal_is_unsupported(self):
        with pytest.raises(UnsupportedNodeType) as exc_info:
            self.translator.translate(ex.t_after("datetime", "2020-01-01T00:00:00Z"))

        assert exc_info.value.variant == "TemporalComparison"
        assert exc_info.value.dialect == "sql"


class TestCql2TextTranslator:
    translator = Cql2TextTranslator()

    def test_nested_logical(self):
        node = ex.and_(
            ex.eq("status", "published"),
            ex.or_(ex.lt("eo:cloud_cover", 10), ex.not_(ex.is_null("platform"))),
        )

        assert (
            self.translator.translate(node)
            == "status = 'published' AND (eo:cloud_cover < 10 OR NOT platform IS NULL)"
        )

    def test_not_groups_logical_child(self):
        node = ex.not_(ex.or_(ex.eq("a", 1), ex.eq("b", 2)))
        assert self.translator.translate(node) == "NOT (a = 1 OR b = 2)"

    @pytest.mark.parametrize(
        "node, expected",
        (
            (ex.eq("name", "O'Brien"), "name = 'O''Brien'"),
            (ex.eq("flag", True), "flag = TRUE"),
            (ex.neq("a", ex.prop("b")), "a <> b"),
            (ex.between("temp", 1, 30.5), "temp BETWEEN 1 AND 30.5"),
            (ex.like("name", "Land%"), "name LIKE 'Land%'"),
            (ex.in_("a", ["x", "y"]), "a IN ('x', 'y')"),
            (ex.is_null("a"), "a IS NULL"),
            (ex.eq("d", date(2020, 1, 1)), "d = DATE('2020-01-01')"),
            (
                ex.t_after("datetime", datetime(2020, 1, 1, tzinfo=timezone.utc)),
                "T_AFTER(datetime, TIMESTAMP('2020-01-01T00:00:00Z'))",
            ),
            (
                ex.t_intersects("datetime", ("2020-01-01T00:00:00Z", None)),
                "T_INTERSECTS(datetime, INTERVAL('2020-01-01T00:00:00Z','..'))",
            ),
            (
                ex.s_intersects("geometry", {"type": "Point", "coordinates": [1, 2]}),
                "S_INTERSECTS(geometry, POINT(1 2))",
            ),
            (
                ex.s_within("geometry", [0, 0, 1, 1]),
                "S_WITHIN(geometry, BBOX(0,0,1,1))",
            ),
            (ex.a_contains("tags", ["a", "b"]), "A_CONTAINS(tags, ('a', 'b'))"),
            (
                ex.eq("title", ex.casei("landsat")),
                "title = CASEI('landsat')",
            ),
            (ex.function("my_fn", ex.prop("a"), 1), "my_fn(a, 1)"),
        ),
    )
    def test_render(self, node, expected):
        assert self.translator.translate(node) == expected

    def test_unknown_geometry_type(self):
        node = ex.s_intersects(
            "geometry", {"type": "GeometryCollection", "coordinates": []}
        )
        with pytest.raises(UnsupportedNodeType):
            self.translator.translate(node)


@pytest.mark.parametrize(
    "geometry, wkt",
    (
        ({"type": "Point", "coordinates": [1.5, 2]}, "POINT(1.5 2)"),
        (
            {"type": "MultiPoint", "coordinates": [[1, 2], [3, 4]]},
            "MULTIPOINT(1 2, 3 4)",
        ),
        (
            {"type": "LineString", "coordinates": [[1, 2], [3, 4]]},
            "LINESTRING(1 2, 3 4)",
        ),
        (
            {
                "type": "MultiLineString",
                "coordinates": [[[1, 2], [3, 4]], [[5, 6], [7, 8]]],
            },
            "MULTILINESTRING((1 2, 3 4), (5 6, 7 8))",
        ),
        (
            {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]},
            "POLYGON((0 0, 1 0, 1 1, 0 0))",
        ),
        (
            {
                "type": "MultiPolygon",
                "coordinates": [
                    [[[0, 0], [1, 0], [1, 1], [0, 0]]],
                    [[[2, 2], [3, 2], [3, 3], [2, 2]]],
                ],
            },
            "MULTIPOLYGON(((0 0, 1 0, 1 1, 0 0)), ((2 2, 3 2, 3 3, 2 2)))",
        ),
    ),
)
def test_to_wkt(geometry, wkt):
    assert to_wkt(ex.geometry(geometry)) == wkt


def test_custom_dialect():
    class PropertyNames(Translator[list]):
        dialect = "names"

        def visit_and(self, node):
            return [name for child in node.children for name in self.visit(child)]

        def visit_comparison(self, node):
            return [node.left.name]

    translator = PropertyNames()

    assert translator.translate(ex.and_(ex.eq("a", 1), ex.lt("b", 2))) == ["a", "b"]
    with pytest.raises(UnsupportedNodeType):
        translator.translate(ex.is_null("a"))


def test_generic_visitor_requires_overrides():
    with pytest.raises(NotImplementedError):
        NodeVisitor().visit(nodes.Property("a"))
