"""
historical wirings, written as the letter each contact A..Z is wired to.
rotor entries carry the letters at which the rotor signals a turnover.
"""

ETW_ALPHA = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
# keyboard order as used on the commercial machines
ETW_QWERTZ = "QWERTYUIOPASDFGHJKLZXCVBNM"

ROTORS = {
    "I": ("EKMFLGDQVZNTOWYHXUSPAIBRCJ", "Q"),
    "II": ("AJDKSIRUXBLHWTMCQGZNPYFVOE", "E"),
    "III": ("BDFHJLCPRTXVZNYEIWGAKMUSQO", "V"),
    "IV": ("ESOVPZJAYQUIRHXLNFTGKDCMWB", "J"),
    "V": ("VZBRGITYUPSDNHLXAWMJQOFECK", "Z"),
}

REFLECTORS = {
    "B": "YRUHQSLDPXNGOKMIEBFZCWVJAT",
    "C": "FVPJIAOYEDRZXWGCTKUQSBNMHL",
}

ENTRY_WHEELS = {
    "ALPHA": ETW_ALPHA,
    "QWERTZ": ETW_QWERTZ,
}
