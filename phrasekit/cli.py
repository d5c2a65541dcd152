#!/usr/bin/env python3
"""
PhraseKit CLI
=============
Command-line interface for passphrase generation and strength estimates.

Usage:
    phrasekit generate -n 5 --template strong --mutator standard
    phrasekit entropy strong --mutator standard
    phrasekit templates
    phrasekit mutators
    phrasekit words
"""

import argparse
import json
import logging
import sys

from phrasekit import __version__
from phrasekit.errors import PhraseKitError
from phrasekit.settings import get_setting


# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def print(self, *args, **kwargs):
        if not self.quiet:
            print(*args, **kwargs)

    def result(self, *args, **kwargs):
        """Primary output; printed even in quiet mode."""
        print(*args, **kwargs)

    def error(self, msg: str):
        print(f"Error: {msg}", file=sys.stderr)

    def table(self, headers: list, rows: list, col_widths: list = None):
        """Print a formatted table."""
        if self.quiet:
            return

        if not col_widths:
            col_widths = [max(len(str(h)), max((len(str(r[i])) for r in rows), default=0)) + 2
                          for i, h in enumerate(headers)]

        header_line = ''.join(str(h).ljust(w) for h, w in zip(headers, col_widths))
        print(header_line)
        print('-' * len(header_line))

        for row in rows:
            print(''.join(str(c).ljust(w) for c, w in zip(row, col_widths)))


def configure_logging(verbose: bool = False):
    level = logging.DEBUG if verbose else get_setting("logging.level", "WARNING")
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def make_kit(args):
    from phrasekit import PhraseKit
    from phrasekit.randomness import seeded_randomness, set_randomness

    if getattr(args, 'seed', None) is not None:
        set_randomness(seeded_randomness(args.seed))
    return PhraseKit()


# =============================================================================
# Commands
# =============================================================================

def cmd_generate(args, out: Output):
    """Generate passphrases."""
    kit = make_kit(args)
    template = args.template or kit.config.default_template
    count = kit.config.count if args.count is None else args.count

    phrases = kit.generate_many(count, template=template, mutator=args.mutator,
                                retries=args.retries)

    bits = None
    if args.entropy or args.json:
        bits = kit.entropy_of(template, mutator=args.mutator)

    if args.json:
        data = {
            'template': template,
            'mutator': args.mutator,
            'entropy': round(bits, 2),
            'phrases': phrases,
        }
        out.result(json.dumps(data, indent=2))
        return 0

    for phrase in phrases:
        out.result(phrase)
    if bits is not None:
        out.print(f"\nEntropy: {bits:.2f} bits ({template})")
    return 0


def cmd_entropy(args, out: Output):
    """Show the entropy of one or more templates."""
    kit = make_kit(args)
    names = args.templates or [kit.config.default_template]

    rows = []
    for name in names:
        bits = kit.entropy_of(name, mutator=args.mutator)
        rows.append([name, f"{bits:.2f}"])
        if out.quiet:
            out.result(f"{bits:.2f}")

    out.table(['Template', 'Bits'], rows, [24, 10])
    return 0


def cmd_templates(args, out: Output):
    """List templates and collections with their entropy."""
    kit = make_kit(args)
    registry = kit.template_registry

    rows = []
    for name in kit.templates():
        kind = 'collection' if registry.is_collection(name) else 'template'
        rows.append([name, kind, f"{kit.entropy_of(name):.2f}"])
    out.table(['Name', 'Kind', 'Bits'], rows, [24, 12, 10])
    return 0


def cmd_mutators(args, out: Output):
    """List mutator presets."""
    kit = make_kit(args)

    rows = []
    for name in kit.mutators():
        mutator = kit.mutator_registry.get(name)
        upper, numbers = mutator.upper, mutator.numbers
        rows.append([
            name,
            f"{upper.type} x{upper.count or 'random'}" if upper.enabled else '-',
            f"{numbers.type} x{numbers.count or 'random'}" if numbers.enabled else '-',
            f"{mutator.entropy_bits():.2f}",
        ])
    out.table(['Name', 'Upper', 'Numbers', 'Bits'], rows, [12, 20, 24, 8])
    return 0


def cmd_words(args, out: Output):
    """Show word pool sizes."""
    kit = make_kit(args)
    rows = [[category, size] for category, size in kit.word_counts().items()]
    out.table(['Pool', 'Words'], rows, [22, 8])
    return 0


# =============================================================================
# Main
# =============================================================================

def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='phrasekit',
        description='PhraseKit - Readable Passphrase Generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate -n 5
  %(prog)s generate --template strong --mutator standard --entropy
  %(prog)s generate --seed 42 --json
  %(prog)s entropy normal strong insane
  %(prog)s templates
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- generate ---
    p = subparsers.add_parser('generate', aliases=['gen', 'g'], help='Generate passphrases')
    p.add_argument('-n', '--count', type=int, help='Number of phrases (default: from config)')
    p.add_argument('--template', '-t', help='Template or collection name')
    p.add_argument('--mutator', '-m', help="Mutator preset ('none' to disable)")
    p.add_argument('--retries', '-r', type=int, help='Retries after an exhausted word pool')
    p.add_argument('--seed', type=int, help='Repeatable output (not for real passphrases)')
    p.add_argument('--entropy', '-e', action='store_true', help='Also print the entropy')
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')

    # --- entropy ---
    p = subparsers.add_parser('entropy', aliases=['e'], help='Show template entropy')
    p.add_argument('templates', nargs='*', help='Template or collection names')
    p.add_argument('--mutator', '-m', help='Mutator preset to include')

    # --- templates ---
    subparsers.add_parser('templates', help='List templates and collections')

    # --- mutators ---
    subparsers.add_parser('mutators', help='List mutator presets')

    # --- words ---
    subparsers.add_parser('words', help='Show word pool sizes')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    cmd_map = {'gen': 'generate', 'g': 'generate', 'e': 'entropy'}
    command = cmd_map.get(args.command, args.command)

    configure_logging(args.verbose)
    out = Output(quiet=args.quiet)

    commands = {
        'generate': cmd_generate,
        'entropy': cmd_entropy,
        'templates': cmd_templates,
        'mutators': cmd_mutators,
        'words': cmd_words,
    }

    try:
        return commands[command](args, out)
    except PhraseKitError as e:
        out.error(str(e))
        return 1


if __name__ == '__main__':
    sys.exit(main())
