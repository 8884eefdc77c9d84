import logging
import string

import numpy as np

import enigma_wirings as wirings

logger = logging.getLogger(__name__)

ALPHABET = string.ascii_uppercase


class ConfigurationError(ValueError):
    """raised when a machine part cannot be built from the given wiring or settings"""


class InvalidCharacterError(ValueError):
    """raised for a key that is not part of the machine's character set"""


def make_notches(n_positions: int, notch_positions) -> list:
    notches = n_positions * [0]
    for pos in notch_positions:
        if not 0 <= pos < n_positions:
            raise ConfigurationError(f'notch position {pos} is outside of 0..{n_positions - 1}')
        notches[pos] = 1
    return notches


def notches_from_letters(letters: str, charset: str = ALPHABET) -> list:
    try:
        positions = [charset.index(letter) for letter in letters]
    except ValueError:
        raise ConfigurationError(f'notch letters {letters!r} are not all in the character set') from None
    return make_notches(len(charset), positions)


def gen_permutation(n_elements: int, seed: int) -> list:
    rng = np.random.default_rng(seed)
    return rng.permutation(n_elements).tolist()


def gen_swap_dict(elements: list, n_swaps: int, seed):
    elements = elements.copy()
    rng = np.random.default_rng(seed)

    # random input jacks of the board
    firsts = rng.choice(elements, size=n_swaps, replace=False).tolist()
    # remove them from the list
    for el in firsts:
        elements.remove(el)

    # random output jacks
    seconds = rng.choice(elements, size=n_swaps, replace=False).tolist()
    for el in seconds:
        elements.remove(el)

    swap_dict = dict()
    for first, second in zip(firsts, seconds):
        swap_dict[first] = second
        swap_dict[second] = first
    # the ports that are not connected
    for el in elements:
        swap_dict[el] = el
    return swap_dict


class SubstitutionTable:
    """
    A bijection over the indices 0..n-1 together with its inverse.
    forward[i] is the contact that contact i is wired to, backward undoes it.
    """

    def __init__(self, wiring: str, charset: str = ALPHABET):
        if len(wiring) != len(charset):
            raise ConfigurationError(
                f'wiring {wiring!r} has {len(wiring)} symbols, the character set has {len(charset)}')
        try:
            indices = [charset.index(symbol) for symbol in wiring]
        except ValueError:
            raise ConfigurationError(f'wiring {wiring!r} contains symbols outside of the character set') from None
        self._build(indices)

    @classmethod
    def from_indices(cls, indices):
        table = cls.__new__(cls)
        table._build(indices)
        return table

    def _build(self, indices):
        forward = np.array(indices)
        if forward.ndim != 1 or forward.size == 0:
            raise ConfigurationError('wiring must be a non-empty sequence')
        if not np.issubdtype(forward.dtype, np.integer):
            raise ConfigurationError(f'wiring must hold integer contacts, got {forward.dtype}')
        n_positions = forward.size
        # a duplicate would leave a hole in the inverse table
        if not np.array_equal(np.sort(forward), np.arange(n_positions)):
            raise ConfigurationError(f'wiring {forward.tolist()} is not a permutation of 0..{n_positions - 1}')

        self.n_positions = n_positions
        self.forward = forward
        self.backward = np.argsort(forward)
        self.forward.setflags(write=False)
        self.backward.setflags(write=False)


class Rotor:
    def __init__(self, wiring, notches, initial_position: int = 0, ring_setting: int = 0,
                 charset: str = ALPHABET):
        if isinstance(wiring, SubstitutionTable):
            self.table = wiring
        else:
            self.table = SubstitutionTable(wiring, charset)
        self.n_positions = self.table.n_positions

        notches = list(notches)
        if len(notches) != self.n_positions:
            raise ConfigurationError(
                f'need one notch flag per position ({self.n_positions}), got {len(notches)}')
        if any(flag not in (0, 1) for flag in notches):
            raise ConfigurationError(f'notch flags must be 0 or 1, got {notches}')
        self.notches = tuple(int(flag) for flag in notches)

        for name, value in (('initial position', initial_position), ('ring setting', ring_setting)):
            if not 0 <= value < self.n_positions:
                raise ConfigurationError(f'{name} {value} is outside of 0..{self.n_positions - 1}')
        self.initial_position = initial_position
        # stored only, the ring does not shift the wiring against the notches
        self.ring_setting = ring_setting
        self.position = initial_position

    @classmethod
    def from_seed(cls, n_positions: int = 26, seed: int = 0, notch_positions=(), initial_position: int = 0):
        return cls(SubstitutionTable.from_indices(gen_permutation(n_positions, seed)),
                   make_notches(n_positions, notch_positions),
                   initial_position=initial_position)

    def set_position(self, pos: int):
        self.position = pos % self.n_positions

    def reset(self):
        self.position = self.initial_position

    def rotate(self, turnover: int) -> int:
        """
        Step back by `turnover` positions, 1 if the previous rotor signalled a turnover.
        Returns the turnover for the next rotor: 1 if this rotor now rests on a notch,
        whether it moved or not.
        The double step of the historical machines is not modelled.
        """
        if turnover not in (0, 1):
            raise ValueError(f'turnover must be 0 or 1, got {turnover}')
        self.position = (self.position - turnover) % self.n_positions
        return self.notches[self.position]

    def connect_fwd(self, signal: int) -> int:
        contact = (signal + self.position) % self.n_positions
        return int(self.table.forward[contact] - self.position) % self.n_positions

    def connect_bck(self, signal: int) -> int:
        contact = (signal + self.position) % self.n_positions
        return int(self.table.backward[contact] - self.position) % self.n_positions

    def __repr__(self):
        return f'<Rotor pos={self.position} ring={self.ring_setting}>'


class Reflector(Rotor):
    """fixed rotor at the end of the stack, wired as pairs so it has no fixed points"""

    def __init__(self, wiring, charset: str = ALPHABET):
        if not isinstance(wiring, SubstitutionTable):
            wiring = SubstitutionTable(wiring, charset)
        super().__init__(wiring, make_notches(wiring.n_positions, ()))

        forward = self.table.forward
        contacts = np.arange(self.n_positions)
        if np.any(forward == contacts):
            raise ConfigurationError('reflector must not connect a contact to itself')
        if not np.array_equal(forward[forward], contacts):
            raise ConfigurationError('reflector wiring must be symmetric')

    def rotate(self, turnover: int) -> int:
        raise RuntimeError('the reflector is fixed in position')

    def __repr__(self):
        return '<Reflector>'


def make_entry_wheel(wiring, charset: str = ALPHABET) -> Rotor:
    if not isinstance(wiring, SubstitutionTable):
        wiring = SubstitutionTable(wiring, charset)
    return Rotor(wiring, make_notches(wiring.n_positions, ()))


class Plugboard:
    def __init__(self, pairs=(), charset: str = ALPHABET):
        self.charset = charset
        self.n_positions = len(charset)
        self.swap_dict = {el: el for el in range(self.n_positions)}
        for pair in pairs:
            if len(pair) != 2:
                raise ConfigurationError(f'plug {pair!r} must connect exactly 2 symbols')
            first, second = pair
            self.set_element_swap(self._index(first), self._index(second))

    def _index(self, symbol) -> int:
        try:
            return self.charset.index(symbol)
        except ValueError:
            raise ConfigurationError(f'symbol {symbol!r} is not in the character set') from None

    def set_element_swap(self, e1: int, e2: int):
        for el in (e1, e2):
            if el not in self.swap_dict:
                raise ConfigurationError(f'position {el} is not on the plug board')
        if e1 == e2:
            raise ConfigurationError(f'cannot plug position {e1} into itself')
        for el in (e1, e2):
            if self.swap_dict[el] != el:
                raise ConfigurationError(f'position {el} is already plugged')
        self.swap_dict[e1] = e2
        self.swap_dict[e2] = e1

    def unset_element_swap(self, e1: int, e2: int):
        if self.swap_dict.get(e1) != e2 or e1 == e2:
            raise ConfigurationError(f'positions {e1} and {e2} are not plugged together')
        self.swap_dict[e1] = e1
        self.swap_dict[e2] = e2

    def assign_random_swaps(self, n_swaps: int, seed: int):
        if n_swaps > self.n_positions // 2:
            raise ConfigurationError(f'at most {self.n_positions // 2} plugs fit on the board')
        self.swap_dict = gen_swap_dict(list(range(self.n_positions)), n_swaps, seed)

    def get_output(self, input_: int) -> int:
        return self.swap_dict[input_]

    def get_swapped_positions(self):
        return [el for el, out in self.swap_dict.items() if el != out]

    def get_free_positions(self):
        return [el for el, out in self.swap_dict.items() if el == out]

    def __repr__(self):
        plugs = [f'{self.charset[a]}{self.charset[b]}' for a, b in self.swap_dict.items() if a < b]
        return f'<Plugboard {" ".join(plugs)}>'


class EnigmaMachine:
    def __init__(self, rotors, reflector: Reflector, plugboard: Plugboard = None, entry_wheel: Rotor = None,
                 charset: str = ALPHABET):
        self.charset = charset
        n_chars = len(charset)
        if n_chars == 0 or len(set(charset)) != n_chars:
            raise ConfigurationError('character set must be non-empty and free of duplicates')

        self.char_to_number_map = dict()
        for i, char in enumerate(self.charset):
            self.char_to_number_map[char] = i

        self.rotors = list(rotors)
        if not self.rotors:
            raise ConfigurationError('the machine needs at least one rotor')
        rotor_lengths = np.array([rot.n_positions for rot in self.rotors])
        if not np.all(rotor_lengths == n_chars):
            raise ConfigurationError('rotors do not have same number of positions as the chosen character set')

        if plugboard is None:
            plugboard = Plugboard(charset=charset)
        if not plugboard.n_positions == n_chars:
            raise ConfigurationError('plug board does not have the same number of positions as the character set')
        self.plug_board = plugboard

        if entry_wheel is None:
            entry_wheel = make_entry_wheel(charset, charset)
        if not entry_wheel.n_positions == n_chars:
            raise ConfigurationError('entry wheel does not have the same number of positions as the character set')
        self.entry_wheel = entry_wheel

        if not isinstance(reflector, Reflector):
            raise ConfigurationError(f'expected a Reflector, got {type(reflector).__name__}')
        if not reflector.n_positions == n_chars:
            raise ConfigurationError('reflector does not have the same number of positions as the character set')
        self.reflector = reflector

    @classmethod
    def default(cls):
        """rotors I, II, III (I is the fast one), reflector B, no plugs, all rotors at 0"""
        rotors = []
        for name in ('I', 'II', 'III'):
            wiring, notch_letters = wirings.ROTORS[name]
            rotors.append(Rotor(wiring, notches_from_letters(notch_letters)))
        return cls(rotors, Reflector(wirings.REFLECTORS['B']), entry_wheel=make_entry_wheel(wirings.ETW_ALPHA))

    def set_rotor_positions(self, positions):
        positions = list(positions)
        if len(positions) != len(self.rotors):
            raise ConfigurationError(f'got {len(positions)} positions for {len(self.rotors)} rotors')
        for pos in positions:
            if not 0 <= pos < len(self.charset):
                raise ConfigurationError(f'rotor position {pos} is outside of 0..{len(self.charset) - 1}')
        for rot, pos in zip(self.rotors, positions):
            rot.set_position(pos)

    def get_rotor_positions(self):
        return [rot.position for rot in self.rotors]

    def reset(self):
        for rot in self.rotors:
            rot.reset()

    def _to_number(self, char: str) -> int:
        try:
            return self.char_to_number_map[char]
        except KeyError:
            raise InvalidCharacterError(f'character {char!r} is not in the character set') from None

    def keydown(self):
        # first rotor always gets rotated with each new key
        turnover = 1
        for rot in self.rotors:
            turnover = rot.rotate(turnover)
        logger.debug('rotor positions %s', self.get_rotor_positions())

    def cipher_one(self, char: str) -> str:
        number = self._to_number(char)
        number = self.plug_board.get_output(number)
        number = self.entry_wheel.connect_fwd(number)
        path = [number]
        for rot in self.rotors:
            number = rot.connect_fwd(number)
            path.append(number)
        number = self.reflector.connect_fwd(number)
        path.append(number)
        for rot in reversed(self.rotors):
            number = rot.connect_bck(number)
            path.append(number)
        number = self.entry_wheel.connect_bck(number)
        number = self.plug_board.get_output(number)

        output = self.charset[number]
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug('%s -> %s via %s', char, output, ' '.join(self.charset[n] for n in path))
        return output

    def press_key(self, char: str) -> str:
        # a rejected key must not move the rotors
        self._to_number(char)
        self.keydown()
        return self.cipher_one(char)

    def encode_message(self, input_: str) -> str:
        for char in input_:
            self._to_number(char)

        output = str()
        for char in input_:
            output += self.press_key(char)
        return output
