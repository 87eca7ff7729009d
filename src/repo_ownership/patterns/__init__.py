from .compiler import REGEX_COMMENT_PREFIX, CompiledPattern, Dialect, compile_pattern, trim_expression

__all__ = ["REGEX_COMMENT_PREFIX", "CompiledPattern", "Dialect", "compile_pattern", "trim_expression"]
