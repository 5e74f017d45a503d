class AutomatonError(Exception):
  def __init__(self, message: str):
    super(AutomatonError, self).__init__(message)


class GrammarError(AutomatonError):
  """
  A grammar that refers to symbols outside of its vocabularies.
  """


class InvalidSymbolError(AutomatonError):
  """
  An input symbol that is not part of the input alphabet of an automaton.
  """

  def __init__(self, symbol, input_alphabet):
    """
    :param str symbol:
    :param tuple[str] input_alphabet:
    """
    self.symbol = symbol
    super().__init__('Input symbol %r is not in input alphabet { %s }' % (
      symbol, ', '.join(repr(s) for s in input_alphabet)))


class StackUnderflowError(AutomatonError):
  """
  A move that needs to pop from an empty stack.
  """

  def __init__(self, state):
    self.state = state
    super().__init__('Cannot pop from empty stack in state %r' % (state,))


class NoApplicableTransitionError(AutomatonError):
  """
  A forced step for which no transition matches the current configuration.
  """

  def __init__(self, state, input_symbol, stack_symbol):
    self.state = state
    self.input_symbol = input_symbol
    self.stack_symbol = stack_symbol
    super().__init__('No transition for (%r, %r, %r)' % (state, input_symbol, stack_symbol))


class TransitionFormatError(AutomatonError):
  """
  A line that is not a rendered transition.
  """

  def __init__(self, line: str, message: str):
    self.line = line
    super().__init__('Cannot parse transition %r: %s' % (line, message))
