"""
Type on the machine: every key read from the input is enciphered and echoed.
Enciphering the output again with the same settings gives back the input.

    python run_enigma.py HELLOWORLD --rotors I II III --positions A A A
    echo HELLOWORLD | python run_enigma.py --config settings.json
"""
import argparse
import logging
import string
import sys

import enigma_settings
from enigma import ConfigurationError, InvalidCharacterError

logger = logging.getLogger(__name__)


def read_chars(stream):
    # an undecodable byte turns into U+FFFD and is rejected like any other foreign key
    if hasattr(stream, 'reconfigure'):
        stream.reconfigure(errors='replace')
    while True:
        char = stream.read(1)
        if not char:
            return
        yield char


def process_stream(machine, chars):
    for char in chars:
        if char.isspace():
            continue
        try:
            # str.upper maps some non-ascii letters onto A..Z
            if char in string.ascii_lowercase:
                char = char.upper()
            yield machine.press_key(char)
        except InvalidCharacterError as err:
            logger.warning('skipping key: %s', err)


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description='Encipher text on a rotor machine')
    p.add_argument('text', nargs='?', help='text to encipher, read from stdin until end of input if omitted')
    p.add_argument('--config', help='json file with machine settings, options below override it')
    p.add_argument('--rotors', nargs='+', help='rotor names in stack order, fast rotor first (default: I II III)')
    p.add_argument('--positions', nargs='+', help='initial rotor positions as letters or indices')
    p.add_argument('--rings', nargs='+', help='ring settings, one per rotor')
    p.add_argument('--reflector', help='reflector name (default: B)')
    p.add_argument('--entry-wheel', help='entry wheel name (default: ALPHA)')
    p.add_argument('--plugs', nargs='*', help='plug board pairs such as AB CD')
    p.add_argument('-v', '--verbose', action='store_true', help='log stepping and signal paths')
    return p.parse_args(argv)


def main(argv=None, stdin=None, stdout=None) -> int:
    args = parse_args(argv)
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )

    try:
        if args.config:
            settings = enigma_settings.load_settings(args.config)
        else:
            settings = enigma_settings.MachineSettings()
        settings = settings.updated(rotors=args.rotors,
                                    positions=args.positions,
                                    ring_settings=args.rings,
                                    reflector=args.reflector,
                                    entry_wheel=args.entry_wheel,
                                    plugs=args.plugs)
        machine = enigma_settings.build_machine(settings)
    except (ConfigurationError, OSError) as err:
        print(f'error: {err}', file=sys.stderr)
        return 2

    chars = iter(args.text) if args.text is not None else read_chars(stdin)
    for output in process_stream(machine, chars):
        stdout.write(output)
        stdout.flush()
    stdout.write('\n')
    return 0


if __name__ == '__main__':
    sys.exit(main())
