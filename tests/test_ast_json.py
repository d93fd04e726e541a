import json

from uvl.ast import Binary, LetStmt, to_string
from uvl.ast_json import ast_from_obj, ast_to_obj, program_to_obj
from uvl.interpreter import Interpreter
from uvl.parser import parse_program
from uvl.tokens import TokenType

SOURCE = '''let mut total = (1 + 2.5) * -3;
{ total = total + 1; }
println "sum: " == "x" != true;
nil;
'''


def test_program_object_shape():
    obj = program_to_obj(parse_program('let x = 1;', 'p.uvl'))
    assert obj['type'] == 'Program'
    let = obj['body'][0]
    assert let['type'] == 'LetStmt'
    assert let['mutable'] is False
    assert let['name'] == {'__type__': 'Token', 'kind': 'IDENTIFIER', 'lexeme': 'x', 'line': 1, 'literal': None}
    assert let['ctx'] == {'__type__': 'Context', 'source_name': 'p.uvl', 'line': 1, 'unit': '<root>'}
    assert let['initializer']['token']['literal'] == 1.0


def test_load_gives_back_equal_tree():
    statements = parse_program(SOURCE, 'p.uvl')
    text = json.dumps(program_to_obj(statements))
    loaded = ast_from_obj(json.loads(text))
    assert loaded == statements
    assert [to_string(s) for s in loaded] == [to_string(s) for s in statements]


def test_single_node_conversion():
    expr = parse_program('1 + 2;')[0].expression
    back = ast_from_obj(ast_to_obj(expr))
    assert isinstance(back, Binary)
    assert back.operator.type is TokenType.PLUS


def test_number_literals_load_as_floats():
    obj = program_to_obj(parse_program('let x = 4;'))
    obj['body'][0]['initializer']['token']['literal'] = 4
    loaded = ast_from_obj(obj)
    assert isinstance(loaded[0], LetStmt)
    assert isinstance(loaded[0].initializer.token.literal, float)


def test_loaded_program_executes(capsys):
    statements = ast_from_obj(json.loads(json.dumps(program_to_obj(parse_program(SOURCE)))))
    interp = Interpreter()
    interp.execute(statements)
    assert capsys.readouterr().out == 'true\n'
    assert interp.global_env.get('total').value == -9.5
