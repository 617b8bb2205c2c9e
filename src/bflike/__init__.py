from .api import RunOptions, RunResult, get_parser, parse_memory_size, parse_string, run_file, run_string
from .errors import (
    BFError,
    BFParseError,
    BFRuntimeError,
    EndOfInput,
    MiscParseError,
    OutOfMemoryBounds,
    ParseIOError,
    RegexErrors,
    RuntimeIOError,
    UnexpectedEndOfFile,
    UnexpectedEndOfLoop,
)
from .lexer import SimpleMultiTokenSpec, SimpleTokenizer, SimpleTokenSpec
from .parser import Parser
from .program import (
    Add,
    AnnotatedInstruction,
    AnnotatedLoop,
    AnnotatedProgram,
    Input,
    Instruction,
    Loop,
    Move,
    Nop,
    Output,
    Program,
    ProgramIndex,
)
from .regex_lexer import RegexTokenizer
from .runtime import Runner, StepRunner, run, run_with_memsize
from .state import DEFAULT_MEMSIZE, BothUnbounded, Fixed, MemorySize, RightUnbounded
from .token import Token, TokenInfo, TokenType

__all__ = [
    'RunOptions',
    'RunResult',
    'get_parser',
    'parse_memory_size',
    'parse_string',
    'run_file',
    'run_string',
    'BFError',
    'BFParseError',
    'BFRuntimeError',
    'EndOfInput',
    'MiscParseError',
    'OutOfMemoryBounds',
    'ParseIOError',
    'RegexErrors',
    'RuntimeIOError',
    'UnexpectedEndOfFile',
    'UnexpectedEndOfLoop',
    'SimpleMultiTokenSpec',
    'SimpleTokenizer',
    'SimpleTokenSpec',
    'Parser',
    'Add',
    'AnnotatedInstruction',
    'AnnotatedLoop',
    'AnnotatedProgram',
    'Input',
    'Instruction',
    'Loop',
    'Move',
    'Nop',
    'Output',
    'Program',
    'ProgramIndex',
    'RegexTokenizer',
    'Runner',
    'StepRunner',
    'run',
    'run_with_memsize',
    'DEFAULT_MEMSIZE',
    'BothUnbounded',
    'Fixed',
    'MemorySize',
    'RightUnbounded',
    'Token',
    'TokenInfo',
    'TokenType',
]
