from __future__ import annotations

import pytest

from simsweep.models.base import SimModel
from simsweep.models.contagion import ContagionModel
from simsweep.models.registry import discover, get_model, list_models, register


def test_bundled_models_are_discovered() -> None:
    names = list_models()
    assert "contagion" in names
    assert "template" in names
    assert get_model("contagion") is ContagionModel


def test_unknown_model() -> None:
    with pytest.raises(KeyError):
        get_model("no-such-model")


def test_register_sets_name() -> None:
    @register("registry-test")
    class Probe(SimModel):
        def setup(self) -> None:
            pass

    assert get_model("registry-test") is Probe
    assert Probe.name == "registry-test"


def test_duplicate_name_rejected() -> None:
    with pytest.raises(ValueError):

        @register("contagion")
        class Other(SimModel):
            def setup(self) -> None:
                pass


def test_discover_imports_model_modules_only_once() -> None:
    loaded = discover()
    assert {"contagion", "template"} <= set(loaded)
    assert not {"base", "fields", "network", "registry", "schedule"} & set(loaded)
    assert discover() is loaded


def test_listing_includes_bundled_after_custom_registration() -> None:
    @register("registry-listing-test")
    class Custom(SimModel):
        def setup(self) -> None:
            pass

    names = list_models()
    assert "registry-listing-test" in names
    assert {"contagion", "template"} <= set(names)
