import pytest

from jsontools.predicates import PredicateSet, evaluate


@pytest.fixture
def doc():
    return {
        "a": {"b": {"c": "123!ABC"}},
        "n": 5,
        "f": 2.5,
        "flag": True,
        "nothing": None,
        "list": [1, "two"],
        "obj": {},
    }


def check(op, doc, **params):
    return evaluate({"op": op, **params}, doc)


class TestStringPredicates:
    def test_contains(self, doc):
        assert check("contains", doc, path="/a/b/c", value="ABC")
        assert not check("contains", doc, path="/a/b/c", value="abc")
        assert check("contains", doc, path="/a/b/c", value="abc", ignore_case=True)

    def test_starts_and_ends(self, doc):
        assert check("starts", doc, path="/a/b/c", value="123")
        assert not check("starts", doc, path="/a/b/c", value="ABC")
        assert check("ends", doc, path="/a/b/c", value="!abc", ignore_case=True)
        assert not check("ends", doc, path="/a/b/c", value="!abc")

    def test_ignore_case_does_not_mutate_inputs(self, doc):
        descriptor = {"op": "contains", "path": "/a/b/c", "value": "abc", "ignore_case": True}
        assert evaluate(descriptor, doc)
        assert descriptor["value"] == "abc"
        assert doc["a"]["b"]["c"] == "123!ABC"

    def test_wrong_kinds_are_false(self, doc):
        assert not check("contains", doc, path="/n", value="5")
        assert not check("contains", doc, path="/a/b/c", value=1)
        assert not check("starts", doc, path="/missing", value="x")


class TestMatches:
    def test_unanchored_search(self, doc):
        assert check("matches", doc, path="/a/b/c", value=r"\d+!")
        assert check("matches", doc, path="/a/b/c", value="ABC$")
        assert not check("matches", doc, path="/a/b/c", value="^ABC")

    def test_ignore_case_keeps_pattern_meaning(self, doc):
        assert check("matches", doc, path="/a/b/c", value=r"\d!abc", ignore_case=True)
        assert not check("matches", doc, path="/a/b/c", value=r"\d!abc")

    def test_bad_pattern_is_false(self, doc):
        assert not check("matches", doc, path="/a/b/c", value="(")


class TestNumberPredicates:
    def test_less_and_more(self, doc):
        assert check("less", doc, path="/n", value=6)
        assert not check("less", doc, path="/n", value=5)
        assert check("more", doc, path="/f", value=2)
        assert not check("more", doc, path="/f", value=2.5)

    def test_booleans_are_not_numbers(self, doc):
        assert not check("more", doc, path="/flag", value=0)
        assert not check("less", doc, path="/n", value=True)

    def test_non_numbers_are_false(self, doc):
        assert not check("less", doc, path="/a/b/c", value=1)
        assert not check("less", doc, path="/n", value="10")
        assert not check("less", doc, path="/missing", value=10)


class TestExistence:
    def test_defined_and_undefined(self, doc):
        assert check("defined", doc, path="/nothing")
        assert not check("defined", doc, path="/missing")
        assert check("undefined", doc, path="/missing")
        assert check("undefined", doc, path="/list/5")
        assert not check("undefined", doc, path="/list/1")


class TestType:
    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/n", "number"),
            ("/f", "number"),
            ("/a/b/c", "string"),
            ("/flag", "boolean"),
            ("/obj", "object"),
            ("/list", "array"),
            ("/nothing", "null"),
            ("/missing", "undefined"),
            ("", "object"),
        ],
    )
    def test_type_matches(self, doc, path, expected):
        assert check("type", doc, path=path, value=expected)

    def test_type_mismatches(self, doc):
        assert not check("type", doc, path="/flag", value="number")
        assert not check("type", doc, path="/nothing", value="undefined")
        assert not check("type", doc, path="/n", value="integer")
        assert not check("type", doc, path="/missing", value="null")


class TestCombinators:
    def test_vacuous_cases(self, doc):
        assert check("and", doc, apply=[])
        assert not check("or", doc, apply=[])
        assert check("not", doc, apply=[])

    def test_not_negates_a_single_predicate(self, doc):
        p = {"op": "defined", "path": "/n"}
        q = {"op": "defined", "path": "/missing"}
        assert check("not", doc, apply=[p]) is (not evaluate(p, doc))
        assert check("not", doc, apply=[q]) is (not evaluate(q, doc))

    def test_not_is_none_of(self, doc):
        true_pred = {"op": "defined", "path": "/n"}
        false_pred = {"op": "defined", "path": "/missing"}
        assert not check("not", doc, apply=[false_pred, true_pred])
        assert check("not", doc, apply=[false_pred, false_pred])

    def test_and_or(self, doc):
        t = {"op": "type", "path": "/n", "value": "number"}
        f = {"op": "type", "path": "/n", "value": "string"}
        assert check("and", doc, apply=[t, t])
        assert not check("and", doc, apply=[t, f])
        assert check("or", doc, apply=[f, t])
        assert not check("or", doc, apply=[f, f])

    def test_nesting(self, doc):
        inner = {"op": "or", "apply": [{"op": "starts", "path": "/a/b/c", "value": "1"}]}
        assert check("and", doc, apply=[inner, {"op": "not", "apply": [{"op": "undefined", "path": "/n"}]}])

    def test_nested_errors_are_false(self, doc):
        broken = {"op": "contains"}
        unknown = {"op": "replace", "path": "/n", "value": 1}
        assert not check("and", doc, apply=[broken])
        assert not check("or", doc, apply=[broken, unknown])
        assert check("not", doc, apply=[broken, unknown])

    def test_apply_must_be_a_list(self, doc):
        assert not check("and", doc, apply={"op": "defined", "path": "/n"})
        assert not check("or", doc)


class TestPredicateSet:
    def test_unknown_predicates_are_false(self, doc):
        assert not evaluate({"op": "nope", "path": "/n"}, doc)
        assert not evaluate({"path": "/n"}, doc)
        assert not evaluate("defined", doc)

    def test_custom_predicate_composes(self, doc):
        preds = PredicateSet()
        preds.register("even", lambda params, target: target[params["path"].lstrip("/")] % 2 == 0)
        assert not preds.evaluate({"op": "even", "path": "/n"}, doc)
        assert preds.evaluate({"op": "not", "apply": [{"op": "even", "path": "/n"}]}, doc)
        assert "even" not in PredicateSet()

    def test_builtins_can_be_left_out(self):
        preds = PredicateSet(include_builtins=False)
        assert preds.names() == []

    def test_as_operations_raise_on_false(self, doc):
        from jsontools.errors import FailedOperationError

        ops = PredicateSet().as_operations()
        ops.get("defined")({"op": "defined", "path": "/n"}, doc)
        with pytest.raises(FailedOperationError):
            ops.get("defined")({"op": "defined", "path": "/missing"}, doc)
