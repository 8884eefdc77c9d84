import json
import os
import tempfile

import unittest as ut

import enigma_settings
from enigma import ConfigurationError


class SettingsTest(ut.TestCase):
    def write_json(self, data) -> str:
        handle, path = tempfile.mkstemp(suffix='.json')
        with os.fdopen(handle, 'w') as file_:
            file_.write(data if isinstance(data, str) else json.dumps(data))
        self.addCleanup(os.remove, path)
        return path

    def test_default_settings(self):
        machine = enigma_settings.build_machine(enigma_settings.MachineSettings())
        self.assertListEqual(machine.get_rotor_positions(), [0, 0, 0])
        self.assertEqual(machine.encode_message('AAAAA'), 'ETVRQ')

    def test_positions_as_letters(self):
        settings = enigma_settings.MachineSettings(positions=['R', 'f', 0])
        machine = enigma_settings.build_machine(settings)
        self.assertListEqual(machine.get_rotor_positions(), [17, 5, 0])
        self.assertEqual(machine.encode_message('AAAAA'), 'KUDTZ')

    def test_plugs(self):
        for plugs in (['AB', 'cd'], [['A', 'B'], ['C', 'D']]):
            machine = enigma_settings.build_machine(enigma_settings.MachineSettings(plugs=plugs))
            self.assertEqual(machine.encode_message('HELLOWORLD'), 'JLEADRLMNV')

    def test_ring_settings_are_inert(self):
        plain = enigma_settings.build_machine(enigma_settings.MachineSettings())
        ringed = enigma_settings.build_machine(enigma_settings.MachineSettings(ring_settings=[1, 2, 3]))
        self.assertListEqual([rot.ring_setting for rot in ringed.rotors], [1, 2, 3])
        self.assertEqual(plain.encode_message('HELLOWORLD'), ringed.encode_message('HELLOWORLD'))

    def test_bad_settings(self):
        bad = [
            enigma_settings.MachineSettings(rotors=['I', 'IX']),
            enigma_settings.MachineSettings(rotors=[]),
            enigma_settings.MachineSettings(positions=[0, 0]),
            enigma_settings.MachineSettings(positions=['?', 0, 0]),
            enigma_settings.MachineSettings(ring_settings=[0, 0, 30]),
            enigma_settings.MachineSettings(reflector='Z'),
            enigma_settings.MachineSettings(entry_wheel='DVORAK'),
            enigma_settings.MachineSettings(plugs=['AB', 'BC']),
        ]
        for settings in bad:
            with self.assertRaises(ConfigurationError):
                enigma_settings.build_machine(settings)

    def test_parse_position(self):
        self.assertEqual(enigma_settings.parse_position('c'), 2)
        self.assertEqual(enigma_settings.parse_position('7'), 7)
        self.assertEqual(enigma_settings.parse_position(3), 3)
        with self.assertRaises(ConfigurationError):
            enigma_settings.parse_position('AB')
        with self.assertRaises(ConfigurationError):
            enigma_settings.parse_position('\u0131')

    def test_updated_skips_missing_overrides(self):
        settings = enigma_settings.MachineSettings(reflector='C')
        updated = settings.updated(reflector=None, rotors=['V', 'IV'])
        self.assertEqual(updated.reflector, 'C')
        self.assertListEqual(updated.rotors, ['V', 'IV'])
        self.assertListEqual(settings.rotors, ['I', 'II', 'III'])

    def test_load_settings(self):
        path = self.write_json({'rotors': ['I', 'II', 'III'], 'positions': ['R', 'F', 'A'], 'reflector': 'b'})
        settings = enigma_settings.load_settings(path)
        self.assertListEqual(settings.positions, ['R', 'F', 'A'])
        machine = enigma_settings.build_machine(settings)
        self.assertEqual(machine.encode_message('AAAAA'), 'KUDTZ')

    def test_load_bad_settings(self):
        for data in ({'rotors': ['I'], 'lamps': 26}, '[1, 2, 3]', '{"rotors": '):
            path = self.write_json(data)
            with self.assertRaises(ConfigurationError):
                enigma_settings.load_settings(path)

    def test_wrong_types_in_json(self):
        for data in ({'rotors': 5}, {'rotors': ['I', 2]}, {'positions': 'AAA'},
                     {'reflector': 2}, {'plugs': [['A', 1]]}, {'plugs': [7]}):
            path = self.write_json(data)
            with self.assertRaises(ConfigurationError):
                enigma_settings.load_settings(path)

    def test_json_that_is_not_utf8(self):
        handle, path = tempfile.mkstemp(suffix='.json')
        with os.fdopen(handle, 'wb') as file_:
            file_.write(b'{"reflector": "\xff"}')
        self.addCleanup(os.remove, path)
        with self.assertRaises(ConfigurationError):
            enigma_settings.load_settings(path)


if __name__ == '__main__':
    ut.main()
