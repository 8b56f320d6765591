"""simsweep.harness.writer

Results channels.

Every channel is one delimiter-separated file `<fname><suffix>.txt` in the
configured output directory:
- end         `endresults`        scalar results, run end only
- timecourse  `timeresults`       scalar results, every write
- agent       `agentresults`      per-agent scalars, `agentint` gate
- list        `listresults`       list results, `listint` gate
- agent-list  `agentlistresults`  per-agent lists, `listint` gate
- edges       `<net>edgelist`     one per exported network, `netint` gate

Rows start with the seed, the step (every channel except end), then the random
and swept values of the run. Headers are `%` comment lines followed by the
column-label row.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from types import TracebackType
from typing import Any, TextIO

from simsweep.core.exceptions import OutputFileError
from simsweep.core.types import ResolvedSpec, RunContext
from simsweep.harness.context import HarnessContext
from simsweep.models.base import SimulationModel
from simsweep.models.network import iter_edges

LIST_COLUMNS = ["List", "Values"]
EDGE_COLUMNS = ["From", "To", "Info"]
AGENT_COLUMNS = ["AgentID", "Agent"]


class ChannelKind(StrEnum):
    END = "end"
    TIME = "timecourse"
    AGENT = "agent"
    LIST = "list"
    AGENT_LIST = "agentlist"
    EDGES = "edges"


@dataclass(slots=True)
class Channel:
    kind: ChannelKind
    suffix: str
    columns: list[str]
    timed: bool = True
    agent: bool = False
    network: str | None = None
    handle: TextIO | None = None
    rows: Any = field(default=None, repr=False)


def _due(interval: int, step: int) -> bool:
    return interval == 0 or step % interval == 0


class ResultsWriter:
    """Opens the channels a spec needs and writes one batch of rows per call."""

    def __init__(self, resolved: ResolvedSpec, model: SimulationModel, ctx: HarnessContext) -> None:
        self.resolved = resolved
        self.model = model
        self.ctx = ctx
        self.channels = self._plan()

    # -- layout --------------------------------------------------------------

    def _plan(self) -> list[Channel]:
        r = self.resolved
        out: list[Channel] = []
        if r.results:
            out.append(Channel(ChannelKind.END, "endresults", list(r.results), timed=False))
            out.append(Channel(ChannelKind.TIME, "timeresults", list(r.results)))
        if r.agent_results:
            out.append(Channel(ChannelKind.AGENT, "agentresults", list(r.agent_results), agent=True))
        if r.list_results:
            out.append(Channel(ChannelKind.LIST, "listresults", list(LIST_COLUMNS)))
        if r.agent_lists:
            out.append(Channel(ChannelKind.AGENT_LIST, "agentlistresults", list(LIST_COLUMNS), agent=True))
        for net in r.networks:
            out.append(Channel(ChannelKind.EDGES, f"{net}edgelist", list(EDGE_COLUMNS), network=net))
        return out

    def path_for(self, channel: Channel) -> Path:
        return Path(self.ctx.config.output_dir) / f"{self.resolved.keys.fname}{channel.suffix}.txt"

    def labels(self, channel: Channel) -> list[str]:
        r = self.resolved
        out = ["Seed"]
        if channel.timed:
            out.append("Timestep")
        out.extend(p.name for p in r.random)
        out.extend(p.name for p in r.swept)
        if channel.agent:
            out.extend(AGENT_COLUMNS)
        out.extend(channel.columns)
        return out

    def header(self, channel: Channel) -> list[str]:
        """Comment lines preceding the label row."""

        r = self.resolved
        sep = r.keys.sep
        lines = ["% Base Parameters: " + ", ".join(f"{p.name} = {p.initial}" for p in r.params)]
        lines.append("% Random Parameters:")
        lines.extend(f"%{p.name} = {p.code}" for p in r.random)
        lines.append("% Test Parameters:")
        lines.extend(f"%{p.name} = [{', '.join(p.values)}]" for p in r.swept)

        groups = [""] * len(self.labels(channel))
        col = 2 if channel.timed else 1
        if r.random:
            groups[col] = "Random Parameters"
            col += len(r.random)
        if r.swept:
            groups[col] = "Test Parameters"
            col += len(r.swept)
        if channel.agent:
            col += len(AGENT_COLUMNS)
        groups[col] = "Results"
        lines.append("% " + sep.join(groups))
        return lines

    # -- lifecycle -----------------------------------------------------------

    def open(self) -> None:
        out_dir = Path(self.ctx.config.output_dir)
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputFileError(f"Cannot create output directory {out_dir}: {e}") from e

        for ch in self.channels:
            path = self.path_for(ch)
            try:
                fh = path.open("w", encoding="utf-8", newline="")
            except OSError as e:
                self.close()
                raise OutputFileError(f"Cannot create output file {path}: {e}") from e
            ch.handle = fh
            ch.rows = csv.writer(fh, delimiter=self.resolved.keys.sep, lineterminator="\n")
            for line in self.header(ch):
                fh.write(line + "\n")
            ch.rows.writerow(self.labels(ch))

        self.ctx.logger.info(
            "results_opened",
            extra={"output_dir": str(out_dir), "channels": [c.suffix for c in self.channels]},
        )

    def close(self) -> None:
        for ch in self.channels:
            if ch.handle is not None:
                ch.handle.close()
                ch.handle = None
                ch.rows = None

    def __enter__(self) -> ResultsWriter:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # -- rows ----------------------------------------------------------------

    def write(self, run: RunContext, end: bool = False) -> None:
        step = self.model.steps
        keys = self.resolved.keys
        for ch in self.channels:
            if ch.rows is None:
                continue
            lead = [str(run.seed)]
            if ch.timed:
                lead.append(str(step))
            lead.extend(run.prefix)

            if ch.kind is ChannelKind.END:
                if end:
                    ch.rows.writerow(lead + self._results(ch.columns))
            elif ch.kind is ChannelKind.TIME:
                ch.rows.writerow(lead + self._results(ch.columns))
            elif ch.kind is ChannelKind.AGENT:
                if _due(keys.agentint, step):
                    self._write_agents(ch, lead)
            elif ch.kind is ChannelKind.LIST:
                if _due(keys.listint, step):
                    for name in self.resolved.list_results:
                        ch.rows.writerow(lead + [name, self.model.read_result(name)])
            elif ch.kind is ChannelKind.AGENT_LIST:
                if _due(keys.listint, step):
                    self._write_agent_lists(ch, lead)
            elif ch.kind is ChannelKind.EDGES:
                if _due(keys.netint, step):
                    self._write_edges(ch, lead)

    def _results(self, names: list[str]) -> list[str]:
        return [self.model.read_result(n) for n in names]

    def _write_agents(self, ch: Channel, lead: list[str]) -> None:
        for i, agent in enumerate(self.model.agents()):
            if agent is None:
                continue
            values = [self.model.read_agent_result(agent, n) for n in ch.columns]
            ch.rows.writerow(lead + [str(i), str(agent)] + values)

    def _write_agent_lists(self, ch: Channel, lead: list[str]) -> None:
        agents = self.model.agents()
        for name in self.resolved.agent_lists:
            for i, agent in enumerate(agents):
                if agent is None:
                    continue
                ch.rows.writerow(lead + [str(i), str(agent), name, self.model.read_agent_result(agent, name)])

    def _write_edges(self, ch: Channel, lead: list[str]) -> None:
        name = ch.network or ""
        try:
            graph = self.model.network(name)
            if graph is None:
                if name not in self.model.fields():
                    self.ctx.logger.warning("network_export_failed", extra={"network": name, "reason": "unknown"})
                return
            edges = iter_edges(graph)
        except Exception as e:  # noqa: BLE001 - one bad network must not stop the run
            self.ctx.logger.warning("network_export_failed", extra={"network": name, "reason": str(e)})
            return
        for u, v, info in edges:
            ch.rows.writerow(lead + [u, v, info])
