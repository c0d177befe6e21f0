from elc.reader.lexer import Token, lex, tokenize, READER_KEYWORD
from elc.reader.parser import Parser, parse_expression, parse_program, parse_raw_expression
from elc.reader.traditional import parse_traditional_program, parse_traditional_term
from elc.reader.arrow import parse_arrow_program, parse_arrow_term
