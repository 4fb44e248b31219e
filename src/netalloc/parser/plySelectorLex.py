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

import ply.lex as lex

from netalloc.parser import SelectorParseException

keyworldlist = ["in", "notin"]
literals = [",", "(", ")"]
reserved = {k: k.upper() for k in keyworldlist}

# List of token names.   This is always required
tokens = ["ID", "DEQ", "EQ", "NEQ", "NOT", "GT", "LT"] + sorted(list(reserved.values()))

t_DEQ = r"=="
t_EQ = r"="
t_NEQ = r"!="
t_NOT = r"!"
t_GT = r">"
t_LT = r"<"

t_ignore = " \t\n\r"


def t_ID(t: lex.LexToken) -> lex.LexToken:  # noqa: N802
    r"[A-Za-z0-9_./-]+"
    t.type = reserved.get(t.value, "ID")  # Check for reserved words
    return t


def t_error(t: lex.LexToken) -> None:
    raise SelectorParseException(t.lexpos, t.value[0], "Illegal character '%s'" % t.value[0])


# Build the lexer
lexer = lex.lex()
