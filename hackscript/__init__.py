# HackScript language package
# This package provides a tokenizer, parser, type checker and interpreter for HackScript.
from .checker import check_program
from .errors import Diagnostic, HackScriptError
from .interpreter import ExecutionResult, Interpreter, compile_source, run_program
from .parser import parse_program

__all__ = [
    'Diagnostic',
    'ExecutionResult',
    'HackScriptError',
    'Interpreter',
    'check_program',
    'compile_source',
    'parse_program',
    'run_program',
]
