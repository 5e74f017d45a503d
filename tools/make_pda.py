#!/usr/bin/env python3

"""
Main entry point: Print the example grammar and the pushdown automaton made from it.

Needs `cfgpda` to be importable: install the repository first (`pip install -e .`),
or run this as `python -m tools.make_pda` from the repository root.
"""
import argparse
import logging
import sys
from typing import Optional, List

import better_exchook

from cfgpda.errors import AutomatonError
from cfgpda.grammar import make_example_grammar
from cfgpda.graph import get_unreachable_transitions

LOG_LEVELS = {
  'ERROR': logging.ERROR,
  'WARNING': logging.WARNING,
  'INFO': logging.INFO,
  'DEBUG': logging.DEBUG,
}


def main(argv: Optional[List[str]] = None):
  """
  Main entry point.
  """
  better_exchook.install()
  parser = argparse.ArgumentParser(description='Convert a context-free grammar to a pushdown automaton.')
  parser.add_argument(
    '--start-at-initializer', dest='start_at_initializer', default=False, action='store_true',
    help='Start the automaton in the initializer state instead of the start symbol.')
  parser.add_argument(
    '--accepts', dest='word', default=None, action='store',
    help='Check whether the automaton accepts a word (symbols separated by spaces).')
  parser.add_argument(
    '--reachability', default=False, action='store_true',
    help='List transitions that cannot be reached from the start state.')
  parser.add_argument(
    '--verbose', dest='verbose', action='store_true', help='Print full stacktrace for all errors.')
  parser.add_argument(
    '-l', '--log-level', dest='log_level', choices=list(LOG_LEVELS.keys()), default='WARNING',
    help='set the logging level')

  args = parser.parse_args(argv)
  logging.basicConfig(stream=sys.stderr, level=LOG_LEVELS[args.log_level])

  grammar = make_example_grammar()
  print('========== C-F GRAMMAR ============')
  print(grammar)
  print('\n')

  pda = grammar.make_pushdown_automaton(start_at_initializer=args.start_at_initializer)
  print('========== PD AUTOMATON ============')
  print(pda)

  if args.reachability:
    unreachable = get_unreachable_transitions(pda)
    print('\n%i of %i transitions unreachable from start state %s' % (
      len(unreachable), len(pda.transitions), pda.start_state))
    for transition in unreachable:
      print(transition)

  if args.word is not None:
    word = args.word.split()
    try:
      accepted = pda.accepts(word)
    except AutomatonError as ae:
      if args.verbose:
        raise ae
      else:
        print(str(ae))
        sys.exit(1)
        return
    print('\n%r is %s' % (' '.join(word), 'accepted' if accepted else 'rejected'))


if __name__ == '__main__':
  main()
