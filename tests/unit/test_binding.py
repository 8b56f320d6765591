from __future__ import annotations

import logging

import numpy as np
import pytest

from simsweep.core.config import KeyParams
from simsweep.core.types import FieldKind
from simsweep.harness.binding import bind, bind_all, bind_key, coerce, reset_results
from simsweep.models.contagion import ContagionModel
from simsweep.models.template import TemplateModel

LOG = logging.getLogger("simsweep.test.binding")


def _bind(model: TemplateModel, name: str, value: str) -> bool:
    return bind(model, name, value, model.rng, LOG)


@pytest.mark.parametrize(
    ("kind", "raw", "expected"),
    [
        (FieldKind.INT, "3.9", 3),
        (FieldKind.INT, "-2", -2),
        (FieldKind.FLOAT, "0.25", 0.25),
        (FieldKind.BOOL, "1", True),
        (FieldKind.BOOL, "0", False),
        (FieldKind.BOOL, "1.0", True),
        (FieldKind.BOOL, "TRUE", True),
        (FieldKind.BOOL, "false", False),
        (FieldKind.CHAR, "abc", "a"),
        (FieldKind.STR, "hello world", "hello world"),
    ],
)
def test_coerce(kind: FieldKind, raw: str, expected: object) -> None:
    assert coerce(kind, raw) == expected


@pytest.mark.parametrize(("kind", "raw"), [(FieldKind.INT, "x"), (FieldKind.BOOL, "2"), (FieldKind.BOOL, "yes"), (FieldKind.LIST, "[1]")])
def test_coerce_rejects(kind: FieldKind, raw: str) -> None:
    with pytest.raises(ValueError):
        coerce(kind, raw)


def test_bind_sets_typed_field() -> None:
    m = TemplateModel()
    assert _bind(m, "a", "7")
    assert m.a == 7
    assert _bind(m, "b", "label")
    assert m.b == "label"


def test_bind_draws_codes() -> None:
    m = TemplateModel()
    assert _bind(m, "a", "U(5,5)")
    assert m.a == 5


def test_malformed_code_leaves_field(caplog: pytest.LogCaptureFixture) -> None:
    m = TemplateModel()
    m.a = 3
    with caplog.at_level(logging.WARNING):
        assert not _bind(m, "a", "N(1)")
    assert m.a == 3
    assert "random_parameter_malformed" in caplog.messages


def test_string_fields_take_code_like_text_verbatim() -> None:
    m = TemplateModel()
    assert _bind(m, "b", "N(1)")
    assert m.b == "N(1)"


def test_coercion_failure_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    m = TemplateModel()
    m.a = 3
    with caplog.at_level(logging.WARNING):
        assert not _bind(m, "a", "abc")
    assert m.a == 3
    assert "bind_coercion_failed" in caplog.messages


def test_unknown_field_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    m = TemplateModel()
    with caplog.at_level(logging.WARNING):
        assert not _bind(m, "nope", "1")
    assert "bind_field_missing" in caplog.messages


def test_unknown_field_goes_to_model_hook() -> None:
    m = ContagionModel()
    assert bind(m, "infectious_period", "4", m.rng, LOG)
    assert m.p_recover == 0.25


def test_bind_all_counts_successes() -> None:
    m = TemplateModel()
    assert bind_all(m, {"a": "2", "b": "x", "missing": "1"}, m.rng, LOG) == 2


def test_reset_results_zeroes_scalars() -> None:
    m = TemplateModel()
    m.total = 12
    reset_results(m, ["total", "not_a_field"])
    assert m.total == 0


def test_bind_key() -> None:
    keys = KeyParams()
    assert bind_key(keys, "steps", "10", LOG)
    assert keys.steps == 10
    assert bind_key(keys, "gui", "1", LOG)
    assert keys.gui is True
    assert bind_key(keys, "sep", "tab", LOG)
    assert keys.sep == "\t"


def test_bind_key_invalid_keeps_prior(caplog: pytest.LogCaptureFixture) -> None:
    keys = KeyParams(steps=4)
    with caplog.at_level(logging.WARNING):
        assert not bind_key(keys, "steps", "-1", LOG)
        assert not bind_key(keys, "sep", ";;", LOG)
        assert not bind_key(keys, "bogus", "1", LOG)
    assert keys.steps == 4
    assert keys.sep == ","
    assert caplog.messages.count("key_parameter_invalid") == 2
    assert "key_parameter_unknown" in caplog.messages


def test_bind_uses_given_stream() -> None:
    m = TemplateModel()
    m.reseed(11)
    assert _bind(m, "a", "C(1000)")
    assert m.a == int(np.random.default_rng(11).integers(1000))
