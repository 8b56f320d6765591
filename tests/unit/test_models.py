from __future__ import annotations

from pathlib import Path

import networkx as nx
import numpy as np
import pytest

from simsweep.core.types import FieldKind
from simsweep.models.base import SimModel, SimulationModel
from simsweep.models.contagion import ContagionModel, Person
from simsweep.models.fields import FieldRegistry, FieldSpec
from simsweep.models.schedule import Schedule
from simsweep.models.template import TemplateModel


def test_schedule_steps_until_halted() -> None:
    s = Schedule()
    assert not s.step()

    calls: list[int] = []
    s.schedule_repeating(lambda: calls.append(s.steps))
    assert s.step()
    assert s.step()
    assert calls == [0, 1]
    assert s.steps == 2

    s.halt()
    assert not s.step()
    assert s.steps == 2

    s.reset()
    assert s.steps == 0
    assert not s.halted


def test_halt_during_step_reports_exhaustion() -> None:
    s = Schedule()
    s.schedule_repeating(s.halt)
    assert not s.step()
    assert s.steps == 1


def test_registry_rejects_duplicates() -> None:
    reg = FieldRegistry.of(a=FieldKind.INT)
    with pytest.raises(ValueError):
        reg.add(FieldSpec.attr("a", FieldKind.STR))


def test_registry_queries() -> None:
    reg = FieldRegistry.of(a=FieldKind.INT, xs=FieldKind.LIST, net=FieldKind.NETWORK)
    assert reg.names() == ["a", "xs", "net"]
    assert reg.names(FieldKind.NETWORK) == ["net"]
    assert reg.scalar_or_list() == ["a", "xs"]
    assert reg.is_list("xs")
    assert not reg.is_list("missing")
    assert reg.kind("missing") is None
    assert "a" in reg
    assert len(reg) == 3


def test_read_only_fields_have_no_setter() -> None:
    spec = FieldSpec.attr("n", FieldKind.INT, attr="_n", settable=False)
    assert spec.setter is None

    class Holder:
        _n = 4

    assert spec.getter(Holder()) == 4


def test_models_satisfy_protocol() -> None:
    assert isinstance(TemplateModel(), SimulationModel)
    assert isinstance(ContagionModel(), SimulationModel)


def test_read_result_formats_values() -> None:
    class Formats(SimModel):
        FIELDS = FieldRegistry.of(flag=FieldKind.BOOL, ratio=FieldKind.FLOAT, ids=FieldKind.LIST)

        def __init__(self) -> None:
            super().__init__()
            self.flag = True
            self.ratio = 0.1
            self.ids = [1, [2, 3]]

        def setup(self) -> None:
            pass

    m = Formats()
    assert m.read_result("flag") == "true"
    assert m.read_result("ratio") == "0.1"
    assert m.read_result("ids") == "[1, 2, 3]"
    assert m.read_result("unknown") == ""
    assert m.network("ratio") is None


def test_contagion_run_is_reproducible() -> None:
    def run(seed: int) -> list[int]:
        m = ContagionModel()
        m.n_agents = 30
        m.initial_infected = 3
        m.p_infect = 0.5
        m.reseed(seed)
        m.start()
        history = [m.infected]
        while m.steps < 20 and m.step():
            history.append(m.infected)
        return history

    assert run(4) == run(4)


def test_contagion_population_and_networks() -> None:
    m = ContagionModel()
    m.n_agents = 12
    m.degree = 4
    m.initial_infected = 2
    m.start()

    assert len(m.agents()) == 12
    assert all(isinstance(p, Person) for p in m.agents())
    assert m.infected == 2
    assert m.susceptible == 10
    assert sorted(m.infected_ids) == sorted(p.id for p in m.agents() if p.state == "I")
    assert isinstance(m.network("contacts"), nx.Graph)
    assert m.network("contacts").number_of_nodes() == 12
    assert m.network("transmissions").number_of_edges() == 0
    assert m.network("infected") is None


def test_contagion_halts_when_nobody_is_infected() -> None:
    m = ContagionModel()
    m.n_agents = 5
    m.initial_infected = 0
    m.start()
    assert not m.step()
    assert m.steps == 1


def test_contagion_transmissions_are_labelled() -> None:
    m = ContagionModel()
    m.n_agents = 10
    m.degree = 10
    m.p_infect = 1.0
    m.p_recover = 0.0
    m.initial_infected = 1
    m.reseed(1)
    m.start()
    m.step()

    assert m.infected == 10
    edges = list(m.transmissions.edges(data="info"))
    assert len(edges) == 9
    assert {info for _, _, info in edges} == {"1"}


def test_contagion_reads_network_file(temp_dir: Path) -> None:
    p = temp_dir / "contacts.csv"
    p.write_text("from,to\n0,1\n1,2\n", encoding="utf-8")

    m = ContagionModel()
    m.n_agents = 3
    m.network_file = str(p)
    m.start()

    g = m.network("contacts")
    assert sorted(str(n) for n in g.nodes) == ["person0", "person1", "person2"]
    assert g.number_of_edges() == 2


def test_agent_results() -> None:
    m = ContagionModel()
    m.n_agents = 3
    m.initial_infected = 0
    m.start()
    p = m.agents()[0]
    assert m.read_agent_result(p, "state") == "S"
    assert m.read_agent_result(p, "infected") == "[]"
    assert m.read_agent_result(None, "state") == ""


def test_susceptibility_spread() -> None:
    m = ContagionModel()
    m.n_agents = 200
    m.susceptibility_mean = 0.5
    m.susceptibility_var = 0.1
    m.reseed(2)
    m.start()
    values = np.array([p.susceptibility for p in m.agents()])
    assert ((values >= 0) & (values <= 1)).all()
    assert values.std() > 0
