import dataclasses
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

import enigma
import enigma_wirings as wirings
from enigma import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class MachineSettings:
    """
    Everything that is chosen when a machine is set up.
    Rotors are listed in stack order, the fast rotor first.
    Positions may be given as indices or as letters.
    """
    rotors: list = field(default_factory=lambda: ['I', 'II', 'III'])
    positions: list = None
    ring_settings: list = None
    reflector: str = 'B'
    entry_wheel: str = 'ALPHA'
    plugs: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict):
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f'unknown settings: {", ".join(sorted(unknown))}')
        _check_types(data)
        return cls(**data)

    def updated(self, **overrides):
        """copy with every override that is not None applied"""
        return dataclasses.replace(self, **{k: v for k, v in overrides.items() if v is not None})


_LIST_ITEM_TYPES = {
    'rotors': str,
    'positions': (int, str),
    'ring_settings': (int, str),
    'plugs': (str, list),
}


def _check_types(data: dict):
    for name in ('reflector', 'entry_wheel'):
        if name in data and not isinstance(data[name], str):
            raise ConfigurationError(f'{name} must be a name, got {data[name]!r}')
    for name, item_types in _LIST_ITEM_TYPES.items():
        if name not in data:
            continue
        value = data[name]
        if value is None and name in ('positions', 'ring_settings'):
            continue
        if not isinstance(value, list) or not all(isinstance(item, item_types) for item in value):
            raise ConfigurationError(f'{name} must be a list, got {value!r}')
    for pair in data.get('plugs') or []:
        if isinstance(pair, list) and not all(isinstance(end, str) for end in pair):
            raise ConfigurationError(f'plug {pair!r} must name two letters')


def load_settings(path) -> MachineSettings:
    try:
        data = json.loads(Path(path).read_text(encoding='utf-8'))
    except json.JSONDecodeError as err:
        raise ConfigurationError(f'{path} is not valid json: {err}') from err
    except UnicodeDecodeError as err:
        raise ConfigurationError(f'{path} is not utf-8 text: {err}') from err
    if not isinstance(data, dict):
        raise ConfigurationError(f'{path} must hold a json object')
    logger.info('loaded settings from %s', path)
    return MachineSettings.from_dict(data)


def parse_position(value, charset: str = enigma.ALPHABET) -> int:
    if isinstance(value, int):
        return value
    value = str(value).strip()
    # str.upper maps some non-ascii letters onto A..Z
    if value.isascii():
        value = value.upper()
    if value.isdecimal():
        return int(value)
    if len(value) == 1 and value in charset:
        return charset.index(value)
    raise ConfigurationError(f'cannot read {value!r} as a rotor position')


def _per_rotor(values, n_rotors: int, what: str) -> list:
    if values is None:
        return n_rotors * [0]
    values = [parse_position(v) for v in values]
    if len(values) != n_rotors:
        raise ConfigurationError(f'got {len(values)} {what} for {n_rotors} rotors')
    return values


def _lookup(catalogue: dict, name: str, what: str):
    try:
        return catalogue[str(name).upper()]
    except KeyError:
        raise ConfigurationError(f'unknown {what} {name!r}, choose from {", ".join(catalogue)}') from None


def build_machine(settings: MachineSettings) -> enigma.EnigmaMachine:
    n_rotors = len(settings.rotors)
    if n_rotors == 0:
        raise ConfigurationError('at least one rotor must be chosen')
    positions = _per_rotor(settings.positions, n_rotors, 'positions')
    rings = _per_rotor(settings.ring_settings, n_rotors, 'ring settings')

    rotors = []
    for name, pos, ring in zip(settings.rotors, positions, rings):
        wiring, notch_letters = _lookup(wirings.ROTORS, name, 'rotor')
        rotors.append(enigma.Rotor(wiring, enigma.notches_from_letters(notch_letters),
                                   initial_position=pos, ring_setting=ring))

    reflector = enigma.Reflector(_lookup(wirings.REFLECTORS, settings.reflector, 'reflector'))
    entry_wheel = enigma.make_entry_wheel(_lookup(wirings.ENTRY_WHEELS, settings.entry_wheel, 'entry wheel'))
    plugboard = enigma.Plugboard([''.join(pair).upper() for pair in settings.plugs])

    logger.debug('built machine with rotors %s at %s, reflector %s, %s',
                 settings.rotors, positions, settings.reflector, plugboard)
    return enigma.EnigmaMachine(rotors, reflector, plugboard=plugboard, entry_wheel=entry_wheel)
