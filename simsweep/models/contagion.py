"""simsweep.models.contagion

Network contagion (SIR) on a small-world contact graph.

Exercises every results channel:
- scalars: susceptible / infected / recovered / peak_infected
- list: infected_ids
- agents: Person state, susceptibility, infected_at, infected (list)
- networks: contacts (undirected), transmissions (directed, labelled with the step)

The run halts itself once nobody is infected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import networkx as nx

from simsweep.core.types import FieldKind
from simsweep.models.base import SimModel
from simsweep.models.fields import FieldRegistry
from simsweep.models.network import index_nodes, read_network
from simsweep.models.registry import register
from simsweep.sampling.distributions import draw_beta


@dataclass(eq=False, slots=True)
class Person:
    id: int
    state: str = "S"  # S | I | R
    susceptibility: float = 1.0
    infected_at: int = -1
    infected: list[int] = field(default_factory=list)

    def __str__(self) -> str:
        return f"person{self.id}"


@register("contagion")
class ContagionModel(SimModel):
    """SIR contagion over a contact network."""

    FIELDS = FieldRegistry.of(
        n_agents=FieldKind.INT,
        degree=FieldKind.INT,
        rewire=FieldKind.FLOAT,
        p_infect=FieldKind.FLOAT,
        p_recover=FieldKind.FLOAT,
        initial_infected=FieldKind.INT,
        susceptibility_mean=FieldKind.FLOAT,
        susceptibility_var=FieldKind.FLOAT,
        immunity=FieldKind.BOOL,
        network_file=FieldKind.STR,
        network_sep=FieldKind.CHAR,
        susceptible=FieldKind.INT,
        infected=FieldKind.INT,
        recovered=FieldKind.INT,
        peak_infected=FieldKind.INT,
        infected_ids=FieldKind.LIST,
        contacts=FieldKind.NETWORK,
        transmissions=FieldKind.NETWORK,
    )
    AGENT_FIELDS = FieldRegistry.of(
        state=FieldKind.STR,
        susceptibility=FieldKind.FLOAT,
        infected_at=FieldKind.INT,
        infected=FieldKind.LIST,
    )
    RESULTS = ("susceptible", "infected", "recovered", "peak_infected")

    def __init__(self, seed: int = 0) -> None:
        super().__init__(seed)
        self.n_agents = 50
        self.degree = 4
        self.rewire = 0.1
        self.p_infect = 0.2
        self.p_recover = 0.1
        self.initial_infected = 1
        self.susceptibility_mean = 1.0
        self.susceptibility_var = 0.0
        self.immunity = True
        self.network_file = ""
        self.network_sep = ","

        self.susceptible = 0
        self.infected = 0
        self.recovered = 0
        self.peak_infected = 0
        self.infected_ids: list[int] = []
        self.contacts: Any = nx.Graph()
        self.transmissions = nx.DiGraph()

    def bind_unknown(self, name: str, value: str) -> bool:
        # Mean infectious period in steps, the reciprocal of p_recover.
        if name == "infectious_period":
            period = float(value)
            if period <= 0:
                return False
            self.p_recover = 1.0 / period
            return True
        return False

    def setup(self) -> None:
        n = max(int(self.n_agents), 0)
        self.population = [
            Person(i, susceptibility=draw_beta(self.rng, self.susceptibility_mean, self.susceptibility_var))
            for i in range(n)
        ]
        self.contacts = self._build_contacts(n)
        self.transmissions = nx.DiGraph()

        if n > 0:
            k = min(max(int(self.initial_infected), 0), n)
            for i in self.rng.choice(n, size=k, replace=False):
                p = self.population[int(i)]
                p.state = "I"
                p.infected_at = 0

        self.peak_infected = 0
        self._count()
        self.schedule.schedule_repeating(self._tick)

    def _build_contacts(self, n: int) -> Any:
        # "-" stands for "no file" where an empty value cannot be given (positional arguments).
        if self.network_file and self.network_file != "-":
            return read_network(self.network_file, self.network_sep, nodes=index_nodes(self.population))

        if n == 0:
            return nx.Graph()
        k = int(self.degree)
        if k >= n:
            g = nx.complete_graph(n)
        elif k < 2:
            g = nx.empty_graph(n)
        else:
            g = nx.watts_strogatz_graph(n, k, float(self.rewire), seed=int(self.rng.integers(2**31)))
        return nx.relabel_nodes(g, dict(enumerate(self.population)))

    def _tick(self) -> None:
        now = self.schedule.steps + 1
        sick = [p for p in self.population if p is not None and p.state == "I"]

        exposures: list[tuple[Person, Person]] = []
        for p in sick:
            if p not in self.contacts:
                continue
            for nb in self.contacts.neighbors(p):
                if not isinstance(nb, Person) or nb.state != "S":
                    continue
                if self.rng.random() < self.p_infect * nb.susceptibility:
                    exposures.append((p, nb))

        for src, dst in exposures:
            if dst.state != "S":
                continue
            dst.state = "I"
            dst.infected_at = now
            src.infected.append(dst.id)
            self.transmissions.add_edge(src, dst, info=str(now))

        for p in sick:
            if self.rng.random() < self.p_recover:
                p.state = "R" if self.immunity else "S"

        self._count()
        if self.infected == 0:
            self.schedule.halt()

    def _count(self) -> None:
        people = [p for p in self.population if p is not None]
        self.susceptible = sum(1 for p in people if p.state == "S")
        self.infected = sum(1 for p in people if p.state == "I")
        self.recovered = sum(1 for p in people if p.state == "R")
        self.peak_infected = max(self.peak_infected, self.infected)
        self.infected_ids = [p.id for p in people if p.state == "I"]
