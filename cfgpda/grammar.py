"""
The empty symbol (!= the empty word).
Use empty tuple as empty word.
"""
from typing import Tuple, Any, Iterable

from cfgpda.errors import GrammarError

EPSILON = None

EPSILON_NAME = 'ε'


def symbol_name(symbol) -> str:
  """
  :param Any symbol: a grammar symbol, automaton state or `EPSILON`
  """
  if symbol is EPSILON:
    return EPSILON_NAME
  return str(symbol)


def _unique(symbols: Iterable[Any]) -> Tuple[Any, ...]:
  # keeps declaration order, which determines the rendering order
  return tuple(dict.fromkeys(symbols))


class Production:
  """
  A production A -> X_1 X_2 ... X_n.
  """

  def __init__(self, left, *right):
    """
    :param str left: A
    :param str right: X_1 ... X_n
    """
    self.left = left
    if len(right) == 1 and isinstance(right[0], (list, tuple)):
      right = tuple(right[0])
    self.right: Tuple[Any, ...] = tuple(right)

  def match(self, left) -> bool:
    return left == self.left

  def __str__(self):
    return '%s -> %s' % (symbol_name(self.left), ''.join(symbol_name(symbol) for symbol in self.right))

  def __repr__(self):
    return 'Production[%r -> %s]' % (self.left, ' '.join([repr(symbol) for symbol in self.right]))

  def __hash__(self):
    return hash((self.left, self.right))

  def __eq__(self, other):
    if not isinstance(other, Production):
      return False
    return self.left == other.left and self.right == other.right


class Grammar:
  """
  A context free grammar.

  Note that the vocabularies are named after the convention of the construction in
  :func:`cfgpda.automaton.make_pda_from_grammar`:
  `non_terminals` (printed as Vt) become the input alphabet of the automaton,
  `terminals` (printed as Vh) are the symbols that get rewritten, i.e. the left sides of all productions
  and the start symbol, and become the stack alphabet.
  """

  def __init__(self, non_terminals, terminals, start, prods):
    """
    :param Iterable[str] non_terminals: Vt
    :param Iterable[str] terminals: Vh
    :param str start: start symbol, must be in `terminals`
    :param Iterable[Production] prods: in declaration order
    """
    self.non_terminals: Tuple[Any, ...] = _unique(non_terminals)
    self.terminals: Tuple[Any, ...] = _unique(terminals)
    self.start = start
    self.prods: Tuple[Production, ...] = tuple(prods)
    self.symbols = _unique(self.non_terminals + self.terminals)
    self._sanity_check()

  def _sanity_check(self):
    if self.start not in self.terminals:
      raise GrammarError('Start symbol %r must be one of %r' % (self.start, self.terminals))
    for prod in self.prods:
      if not isinstance(prod, Production):
        raise GrammarError('Expected a Production, got %r' % (prod,))
      if prod.left not in self.terminals:
        raise GrammarError('%r: left side must be one of %r' % (prod, self.terminals))
      for symbol in prod.right:
        if symbol is EPSILON:
          raise GrammarError('%r: use an empty right side instead of EPSILON' % prod)
        if symbol not in self.symbols:
          raise GrammarError('%r: unknown symbol %r, only have %r' % (prod, symbol, self.symbols))

  def get_prods_for(self, left):
    """
    :param str left: left-hand symbol of production
    :rtype: tuple[Production]
    """
    return tuple(prod for prod in self.prods if prod.match(left))

  def make_pushdown_automaton(self, start_at_initializer: bool = False):
    """
    :param start_at_initializer: see :func:`cfgpda.automaton.make_pda_from_grammar`
    :rtype: cfgpda.automaton.PushdownAutomaton
    """
    from cfgpda.automaton import make_pda_from_grammar
    return make_pda_from_grammar(self, start_at_initializer=start_at_initializer)

  def __str__(self):
    return '\n'.join([
      'Vt = { %s }' % ', '.join(str(symbol) for symbol in self.non_terminals),
      'Vh = { %s }' % ', '.join(str(symbol) for symbol in self.terminals),
      '',
      'start: %s' % self.start,
      '',
      'P:'] + [str(prod) for prod in self.prods])

  def __repr__(self):
    return 'Grammar[start=%r, %s]' % (self.start, ', '.join(repr(prod) for prod in self.prods))


def make_example_grammar() -> Grammar:
  """
  The grammar printed by `tools/make_pda.py`:
  Vt = {x, y, z}, Vh = {q, A, B, C}, q -> xA, A -> xABC | yB | x, B -> y, C -> z.
  """
  return Grammar(
    non_terminals=('x', 'y', 'z'),
    terminals=('q', 'A', 'B', 'C'),
    start='q',
    prods=(
      Production('q', 'x', 'A'),
      Production('A', 'x', 'A', 'B', 'C'),
      Production('A', 'y', 'B'),
      Production('A', 'x'),
      Production('B', 'y'),
      Production('C', 'z')))
