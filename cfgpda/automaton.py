import logging
import re
from collections import namedtuple, deque
from typing import List, Tuple, Any, Iterable, Dict

from cfgpda.errors import InvalidSymbolError, StackUnderflowError, NoApplicableTransitionError, \
  TransitionFormatError
from cfgpda.grammar import EPSILON, EPSILON_NAME, symbol_name, Grammar

logger = logging.getLogger(__name__)

INITIAL_STATE = 'a0'
MAIN_STATE = 'a1'
FINAL_STATE = 'a*'

"""
Marks the bottom of the stack. Renamed to Z1, Z2, ... if a grammar already uses it.
"""
BOTTOM_SYMBOL = 'Z0'

"""
An instantaneous description without the remaining input.
The stack is a tuple with its top at the end.
"""
Configuration = namedtuple('Configuration', ['state', 'stack'])


class Transition:
  """
  (state, input_symbol, stack_symbol) -> (next_state, push).
  Pops `stack_symbol` and pushes `push` s.t. `push[0]` becomes the new top.
  `input_symbol` is `EPSILON` if no input is consumed.
  """

  def __init__(self, state, input_symbol, stack_symbol, next_state, push=()):
    self.state = state
    self.input_symbol = input_symbol
    self.stack_symbol = stack_symbol
    self.next_state = next_state
    self.push: Tuple[Any, ...] = tuple(push)

  def match(self, state, input_symbol, stack_symbol) -> bool:
    return state == self.state and input_symbol == self.input_symbol and stack_symbol == self.stack_symbol

  def __str__(self):
    return '(%s, %s, %s) -> (%s, %s)' % (
      symbol_name(self.state), symbol_name(self.input_symbol), symbol_name(self.stack_symbol),
      symbol_name(self.next_state), ''.join(symbol_name(symbol) for symbol in self.push))

  def __repr__(self):
    return 'Transition[%s]' % self

  def __hash__(self):
    return hash((self.state, self.input_symbol, self.stack_symbol, self.next_state, self.push))

  def __eq__(self, other):
    if not isinstance(other, Transition):
      return False
    return (
      self.state == other.state and self.input_symbol == other.input_symbol and
      self.stack_symbol == other.stack_symbol and self.next_state == other.next_state and self.push == other.push)


_TRANSITION_REGEX = re.compile(r'\((.+?), (.+?), (.+?)\) -> \((.+?), (.*)\)')


def _group_by_name(alphabet: Iterable[Any]) -> Dict[str, List[Any]]:
  symbols_by_name: Dict[str, List[Any]] = {}
  for symbol in alphabet:
    symbols = symbols_by_name.setdefault(symbol_name(symbol), [])
    if symbol not in symbols:
      symbols.append(symbol)
  return symbols_by_name


def _lookup_symbol(line: str, name: str, symbols_by_name: Dict[str, List[Any]], required: bool = False):
  """
  :returns: the symbol rendered as `name`, or `name` itself if no symbol is and `required` is not set
  """
  symbols = symbols_by_name.get(name, [])
  if len(symbols) > 1:
    raise TransitionFormatError(line, '%r is the name of more than one symbol: %r' % (name, symbols))
  if len(symbols) == 0:
    if required:
      raise TransitionFormatError(line, '%r is not a stack symbol' % name)
    return name
  return symbols[0]


def _split_symbols(line: str, word: str, alphabet: Iterable[Any]) -> Tuple[Any, ...]:
  """
  Splits a concatenation of symbols.
  Fails if `word` cannot be split, or if it can be split in more than one way.
  """
  symbols_by_name = {name: symbols for name, symbols in _group_by_name(alphabet).items() if len(name) > 0}
  # num_splits[pos]: number of ways to split word[pos:], counting stops at 2
  num_splits = [0] * len(word) + [1]
  for pos in reversed(range(len(word))):
    num_splits[pos] = min(2, sum(
      len(symbols) * num_splits[pos + len(name)]
      for name, symbols in symbols_by_name.items() if word.startswith(name, pos)))
  if num_splits[0] == 0:
    raise TransitionFormatError(line, '%r is not a concatenation of stack symbols' % word)
  if num_splits[0] > 1:
    raise TransitionFormatError(line, '%r splits into stack symbols in more than one way' % word)

  symbols = []
  pos = 0
  while pos < len(word):
    name, (symbol,) = next(
      (name, symbols) for name, symbols in symbols_by_name.items()
      if word.startswith(name, pos) and num_splits[pos + len(name)] == 1)
    symbols.append(symbol)
    pos += len(name)
  return tuple(symbols)


def parse_transition(line: str, stack_alphabet: Iterable[Any], input_alphabet: Iterable[Any] = (),
                     states: Iterable[Any] = ()) -> Transition:
  """
  Inverse of `str(transition)`.

  Names are mapped back to the symbols of the given alphabets,
  input symbols to `input_alphabet` or `stack_alphabet`, states to `states`.
  Unknown input symbols and states stay strings, `EPSILON_NAME` becomes `EPSILON`.
  The pushed symbols are concatenated without delimiter, so they are split using `stack_alphabet`.
  This is exact as long as no two symbols share a name and the pushed word splits in only one way,
  otherwise `TransitionFormatError` is raised.
  """
  stack_alphabet = tuple(stack_alphabet)
  match = _TRANSITION_REGEX.fullmatch(line.strip())
  if match is None:
    raise TransitionFormatError(line, 'expected (state, input, stack) -> (state, push)')
  state, input_symbol, stack_symbol, next_state, push = match.groups()
  states_by_name = _group_by_name(states)
  stack_symbols_by_name = _group_by_name(stack_alphabet)
  if input_symbol == EPSILON_NAME:
    input_symbol = EPSILON
  else:
    input_symbol = _lookup_symbol(line, input_symbol, _group_by_name(tuple(input_alphabet) + stack_alphabet))
  return Transition(
    _lookup_symbol(line, state, states_by_name),
    input_symbol,
    _lookup_symbol(line, stack_symbol, stack_symbols_by_name, required=True),
    _lookup_symbol(line, next_state, states_by_name),
    _split_symbols(line, push, stack_alphabet))


class PushdownAutomaton:
  """
  A nondeterministic pushdown automaton (A, X, Y, f, a0, Z0, F).

  The structural fields are not changed after construction.
  `current_state` and `current_stack` describe one run and are only changed by :meth:`advance` and :meth:`reset`.
  """

  def __init__(self, states, input_alphabet, stack_alphabet, transitions, start_state, initial_stack_symbol,
               accepting_states, end_with_empty_stack=False):
    """
    :param Iterable[str] states: A
    :param Iterable[str] input_alphabet: X
    :param Iterable[str] stack_alphabet: Y
    :param Iterable[Transition] transitions: f, in declaration order
    :param str start_state: a0
    :param str initial_stack_symbol: Z0
    :param Iterable[str] accepting_states: F
    :param bool end_with_empty_stack: accept with empty stack instead of accepting states
    """
    self.states: Tuple[Any, ...] = tuple(states)
    self.input_alphabet: Tuple[Any, ...] = tuple(input_alphabet)
    self.stack_alphabet: Tuple[Any, ...] = tuple(stack_alphabet)
    self.transitions: Tuple[Transition, ...] = tuple(transitions)
    self.start_state = start_state
    self.initial_stack_symbol = initial_stack_symbol
    self.accepting_states: Tuple[Any, ...] = tuple(accepting_states)
    self.end_with_empty_stack = end_with_empty_stack

    self.current_state = start_state
    self.current_stack: List[Any] = [initial_stack_symbol]

  @property
  def initial_configuration(self) -> Configuration:
    return Configuration(self.start_state, (self.initial_stack_symbol,))

  @property
  def current_configuration(self) -> Configuration:
    return Configuration(self.current_state, tuple(self.current_stack))

  def reset(self):
    self.current_state = self.start_state
    self.current_stack = [self.initial_stack_symbol]

  def _check_input_symbol(self, input_symbol, allow_epsilon=False):
    if allow_epsilon and input_symbol is EPSILON:
      return
    if input_symbol not in self.input_alphabet:
      raise InvalidSymbolError(input_symbol, self.input_alphabet)

  def step(self, input_symbol):
    """
    Only checks that `input_symbol` is in the input alphabet, the current configuration stays as it is.
    See :meth:`advance` for a step that actually moves.
    """
    self._check_input_symbol(input_symbol)

  def get_matching_transitions(self, state, input_symbol, stack_symbol) -> List[Transition]:
    return [
      transition for transition in self.transitions if transition.match(state, input_symbol, stack_symbol)]

  def get_next_configurations(self, config: Configuration, input_symbol) -> List[Configuration]:
    """
    :param config:
    :param input_symbol: consumed symbol, or `EPSILON` for moves that do not consume input
    :returns: all configurations reachable in one move, in transition declaration order
    """
    if len(config.stack) == 0:
      raise StackUnderflowError(config.state)
    rest_stack, stack_top = config.stack[:-1], config.stack[-1]
    return [
      Configuration(transition.next_state, rest_stack + tuple(reversed(transition.push)))
      for transition in self.get_matching_transitions(config.state, input_symbol, stack_top)]

  def parse_transition(self, line: str) -> Transition:
    """
    Inverse of `str(transition)` for the transitions of this automaton, see :func:`parse_transition`.
    """
    return parse_transition(
      line, self.stack_alphabet, input_alphabet=self.input_alphabet,
      states=self.states + (self.start_state,) + self.accepting_states)

  def advance(self, input_symbol) -> Transition:
    """
    Moves the current configuration using the first matching transition.

    :param input_symbol: consumed symbol, or `EPSILON`
    :returns: the transition taken
    """
    self._check_input_symbol(input_symbol, allow_epsilon=True)
    if len(self.current_stack) == 0:
      raise StackUnderflowError(self.current_state)
    stack_top = self.current_stack[-1]
    transitions = self.get_matching_transitions(self.current_state, input_symbol, stack_top)
    if len(transitions) == 0:
      raise NoApplicableTransitionError(self.current_state, input_symbol, stack_top)
    transition = transitions[0]
    if len(transitions) > 1:
      logger.debug('%i transitions match, taking %s', len(transitions), transition)
    self.current_stack.pop()
    self.current_stack.extend(reversed(transition.push))
    self.current_state = transition.next_state
    return transition

  def is_accepting(self, config: Configuration) -> bool:
    if self.end_with_empty_stack:
      return len(config.stack) == 0
    return config.state in self.accepting_states

  def accepts(self, word: Iterable[Any], max_configurations: int = 10000) -> bool:
    """
    Breadth-first search over all runs on `word`.
    Does not touch the current configuration.

    :param word: sequence of input symbols
    :param max_configurations: give up (and reject) after visiting that many configurations
    """
    word = tuple(word)
    for input_symbol in word:
      self._check_input_symbol(input_symbol)
    initial_item: Tuple[Configuration, int] = (self.initial_configuration, 0)
    visited = {initial_item}
    queue = deque([initial_item])
    while len(queue) >= 1:
      config, pos = queue.popleft()
      if pos == len(word) and self.is_accepting(config):
        logger.debug('Accepted %r in %s', word, config)
        return True
      if len(config.stack) == 0:
        continue
      next_items = [(next_config, pos) for next_config in self.get_next_configurations(config, EPSILON)]
      if pos < len(word):
        next_items.extend(
          (next_config, pos + 1) for next_config in self.get_next_configurations(config, word[pos]))
      for item in next_items:
        if item in visited:
          continue
        if len(visited) >= max_configurations:
          logger.warning('Gave up on %r after %i configurations', word, len(visited))
          return False
        visited.add(item)
        queue.append(item)
    return False

  def __str__(self):
    return '\n'.join([
      'A = { %s }' % ', '.join(symbol_name(state) for state in self.states),
      'X = { %s }' % ', '.join(symbol_name(symbol) for symbol in self.input_alphabet),
      'Y = { %s }' % ', '.join(symbol_name(symbol) for symbol in self.stack_alphabet),
      '',
      'f:'] + [str(transition) for transition in self.transitions] + [
      '',
      'start: %s' % symbol_name(self.start_state),
      'stack: %s' % symbol_name(self.initial_stack_symbol),
      'accepting: { %s }' % ', '.join(symbol_name(state) for state in self.accepting_states)])


def _make_bottom_symbol(grammar: Grammar) -> str:
  bottom_symbol, num = BOTTOM_SYMBOL, 0
  while bottom_symbol in grammar.symbols:
    num += 1
    bottom_symbol = 'Z%i' % num
  if bottom_symbol != BOTTOM_SYMBOL:
    logger.warning('Grammar already uses %r, using %r as bottom of stack', BOTTOM_SYMBOL, bottom_symbol)
  return bottom_symbol


def make_pda_from_grammar(grammar: Grammar, start_at_initializer: bool = False) -> PushdownAutomaton:
  """
  Top-down construction simulating left derivations:
  a0 puts the start symbol above the bottom of the stack, a1 applies the productions,
  and a* is reached once the bottom of the stack shows up again.
  A production A -> X_1 X_2 ... X_n becomes (a1, X_1, A) -> (a1, X_2 ... X_n),
  and A -> (empty) becomes (a1, EPSILON, A) -> (a1, ).

  The input alphabet is `grammar.non_terminals`, the stack alphabet `grammar.terminals` plus the bottom symbol.

  :param start_at_initializer: By default, the start state is the start symbol of the grammar,
    from which no transition leaves. If set, a0 is used instead.
  """
  bottom_symbol = _make_bottom_symbol(grammar)
  assert bottom_symbol not in grammar.symbols
  transitions = [
    Transition(INITIAL_STATE, EPSILON, bottom_symbol, MAIN_STATE, (grammar.start, bottom_symbol)),
    Transition(MAIN_STATE, EPSILON, bottom_symbol, FINAL_STATE, (bottom_symbol,))]
  for prod in grammar.prods:
    if len(prod.right) == 0:
      transitions.append(Transition(MAIN_STATE, EPSILON, prod.left, MAIN_STATE))
    else:
      transitions.append(Transition(MAIN_STATE, prod.right[0], prod.left, MAIN_STATE, prod.right[1:]))

  start_state = INITIAL_STATE if start_at_initializer else grammar.start
  logger.debug(
    'Made %i transitions for %i productions, start state %r', len(transitions), len(grammar.prods), start_state)
  return PushdownAutomaton(
    states=(INITIAL_STATE, MAIN_STATE, FINAL_STATE),
    input_alphabet=grammar.non_terminals,
    stack_alphabet=grammar.terminals + (bottom_symbol,),
    transitions=transitions,
    start_state=start_state,
    initial_stack_symbol=bottom_symbol,
    accepting_states=(FINAL_STATE,))
