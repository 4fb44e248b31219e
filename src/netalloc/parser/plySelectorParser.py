"""
    Copyright 2024 Inmanta

    Licensed under the Apache License, Version 2.0 (the "License");
    you may not use this file except in compliance with the License.
    You may obtain a copy of the License at

        http://www.apache.org/licenses/LICENSE-2.0

    Unless required by applicable law or agreed to in writing, software
    distributed under the License is distributed on an "AS IS" BASIS,
    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
    See the License for the specific language governing permissions and
    limitations under the License.

    Contact: code@inmanta.com
"""

import logging
import threading

import ply.yacc as yacc
from ply.yacc import YaccProduction

from netalloc.labels import Operator, Requirement, Selector
from netalloc.parser import SelectorParseException, plySelectorLex
from netalloc.parser.plySelectorLex import reserved, tokens  # NOQA

LOGGER = logging.getLogger(__name__)

start = "selector"

comparison_operators = {
    "=": Operator.equals,
    "==": Operator.double_equals,
    "!=": Operator.not_equals,
    ">": Operator.greater_than,
    "<": Operator.less_than,
}


def p_selector(p: YaccProduction) -> None:
    "selector : requirement_list"
    p[0] = Selector(p[1])


def p_selector_empty(p: YaccProduction) -> None:
    "selector : empty"
    p[0] = Selector.everything()


def p_requirement_list_collect(p: YaccProduction) -> None:
    "requirement_list : requirement_list ',' requirement"
    p[1].append(p[3])
    p[0] = p[1]


def p_requirement_list_term(p: YaccProduction) -> None:
    "requirement_list : requirement"
    p[0] = [p[1]]


def p_requirement_exists(p: YaccProduction) -> None:
    "requirement : ID"
    p[0] = Requirement.new(p[1], Operator.exists)


def p_requirement_does_not_exist(p: YaccProduction) -> None:
    "requirement : NOT ID"
    p[0] = Requirement.new(p[2], Operator.does_not_exist)


def p_requirement_compare(p: YaccProduction) -> None:
    """requirement : ID EQ value
    | ID DEQ value
    | ID NEQ value
    | ID GT value
    | ID LT value"""
    p[0] = Requirement.new(p[1], comparison_operators[p[2]], [p[3]])


def check_value_set(p: YaccProduction) -> None:
    # `()` reduces to a single empty value
    if p[4] == [""]:
        raise SelectorParseException(p.lexpos(3), p[3], "operator '%s' requires at least one value" % p[2])


def p_requirement_in(p: YaccProduction) -> None:
    "requirement : ID IN '(' value_list ')'"
    check_value_set(p)
    p[0] = Requirement.new(p[1], Operator.in_, p[4])


def p_requirement_not_in(p: YaccProduction) -> None:
    "requirement : ID NOTIN '(' value_list ')'"
    check_value_set(p)
    p[0] = Requirement.new(p[1], Operator.not_in, p[4])


def p_value(p: YaccProduction) -> None:
    "value : ID"
    p[0] = p[1]


def p_value_empty(p: YaccProduction) -> None:
    "value : empty"
    p[0] = ""


def p_value_list_collect(p: YaccProduction) -> None:
    "value_list : value_list ',' value"
    p[1].append(p[3])
    p[0] = p[1]


def p_value_list_term(p: YaccProduction) -> None:
    "value_list : value"
    p[0] = [p[1]]


def p_empty(p: YaccProduction) -> None:
    "empty :"
    pass


# Error rule for syntax errors
def p_error(p: YaccProduction) -> None:
    if p is None:
        raise SelectorParseException(lexer.lexpos, None, "Unexpected end of selector")

    # keyword instead of ID
    if p.type in reserved.values() and parser.symstack[-1].type in ("$end", ","):
        raise SelectorParseException(p.lexpos, p.value, "invalid key, %s is a reserved keyword" % p.value)

    raise SelectorParseException(p.lexpos, p.value)


# Build the parser
lexer = plySelectorLex.lexer
parser = yacc.yacc(debug=False, write_tables=False, tabmodule="selector_parsetab")

# The ply lexer and parser keep the state of the parse in progress
_parse_lock = threading.Lock()


def parse(expression: str) -> Selector:
    """
    Parse a label selector expression, e.g. `status=reserved,type in (default,untagged)`.

    :param expression: Comma separated requirements, all of which have to match. The empty expression selects everything.
    :raises InvalidSelector: The expression is not a valid selector.
    """
    with _parse_lock:
        lexer.lineno = 1
        result = parser.parse(expression, lexer=lexer, debug=False)
    LOGGER.debug("Parsed selector %r as %s", expression, result)
    return result
