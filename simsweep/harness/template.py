"""simsweep.harness.template

Editable spec skeletons generated from a model's field registries.
"""

from __future__ import annotations

from pathlib import Path

from simsweep.core.config import KEY_PARAM_HELP, KEY_PARAMS
from simsweep.core.exceptions import OutputFileError
from simsweep.core.types import FieldKind
from simsweep.harness.resolver import AGENT_INFO, EDGE_LIST
from simsweep.models.base import SimulationModel

USAGE = """\
% How to use this file
%
% Each line is `name = value`. Give a parameter several space-separated values
% to run every combination with the other swept parameters:
%	parameter = 0 1 2
% Or draw it at random, once per iteration:
%	parameter = U(<low>,<high>)
%	parameter = N(<mean>,<sd>)
%	parameter = C(<number of choices>)
%	parameter = G(<mean>,<sd>,<optional minimum>)
% Leave the value empty to collect a field as a result:
%	result =
% Model results go to <fname>endresults.txt (run end) and <fname>timeresults.txt
% (every testint steps).
%
% *agentInfo lists agent fields to collect into <fname>agentresults.txt and
% <fname>agentlistresults.txt; *edgeList lists networks to write to
% <fname><network>edgelist.txt. Delete names you do not want, or the whole line.
% Starred lines are key parameters; empty ones keep their defaults.
% Text after % is a comment (write \\% for a literal percent sign).
"""


def render_template(model: SimulationModel, *, auto_params: bool = True, auto_results: bool = True) -> str:
    lines = [USAGE, "% Key Parameters:"]
    lines.extend(f"*{k} =  % {KEY_PARAM_HELP[k]}" for k in KEY_PARAMS)

    declared, _ = model.declare_names()
    lines.append("")
    lines.append("% Model Parameters:")
    lines.extend(f"{n} =" for n in declared)

    if auto_params or auto_results:
        fields = model.fields()
        for n in fields.scalar_or_list():
            if n not in declared:
                lines.append(f"{n} =")

        agent_names = model.agent_fields().scalar_or_list()
        lines.append("")
        lines.append("% Agent Parameters:")
        lines.append(f"{AGENT_INFO} = {' '.join(agent_names)}".rstrip())

        networks = fields.names(FieldKind.NETWORK)
        if networks:
            lines.append("")
            lines.append("% Networks:")
            lines.append(f"{EDGE_LIST} = {' '.join(networks)}")

    return "\n".join(lines) + "\n"


def write_template(
    model: SimulationModel,
    path: str | Path = "inputTemplate.txt",
    *,
    auto_params: bool = True,
    auto_results: bool = True,
) -> Path:
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(render_template(model, auto_params=auto_params, auto_results=auto_results), encoding="utf-8")
    except OSError as e:
        raise OutputFileError(f"Failed to create input file {p}: {e}") from e
    return p
