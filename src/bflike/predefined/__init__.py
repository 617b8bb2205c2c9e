from . import brainfuck, ook

LANGUAGES = {
    'bf': brainfuck,
    'brainfuck': brainfuck,
    'ook': ook,
}

__all__ = [
    'brainfuck',
    'ook',
    'LANGUAGES',
]
