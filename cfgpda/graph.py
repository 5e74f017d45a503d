from typing import Set, Any, List

import networkx as nx

from cfgpda.automaton import PushdownAutomaton, Transition


def make_transition_graph(pda: PushdownAutomaton) -> nx.MultiDiGraph:
  """
  One node per state (and for the start state, even if it is not one of `pda.states`),
  one edge per transition, stored as edge attribute `transition`.
  """
  graph = nx.MultiDiGraph()
  graph.add_nodes_from(pda.states)
  graph.add_node(pda.start_state)
  for transition in pda.transitions:
    graph.add_edge(transition.state, transition.next_state, transition=transition)
  return graph


def get_reachable_states(pda: PushdownAutomaton) -> Set[Any]:
  """
  Ignores the stack, so this over-approximates the states any run can reach.
  """
  graph = make_transition_graph(pda)
  return {pda.start_state} | nx.descendants(graph, pda.start_state)


def get_unreachable_transitions(pda: PushdownAutomaton) -> List[Transition]:
  reachable_states = get_reachable_states(pda)
  return [transition for transition in pda.transitions if transition.state not in reachable_states]
