from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .agent import Agent, AgentId
from .config import DebugOptions
from .flowfield import FlowField
from .grid import EnvironmentGrid


@dataclass
class SimulationContext:
    """Everything one steering pass reads or writes, passed explicitly."""

    grid: EnvironmentGrid
    agents: Dict[AgentId, Agent] = field(default_factory=dict)
    flow_fields: List[FlowField] = field(default_factory=list)
    debug: DebugOptions | None = None

    def add_agent(self, agent: Agent) -> AgentId:
        self.agents[agent.id] = agent
        return agent.id

    def remove_agent(self, agent_id: AgentId) -> Agent | None:
        return self.agents.pop(agent_id, None)
