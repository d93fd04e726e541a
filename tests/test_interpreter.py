import pytest

from uvl.ast import Context, ExpressionStmt, Grouping, Literal
from uvl.errors import LexError, ParseError, UnsupportedOperatorError, UvlNameError, UvlRuntimeError
from uvl.interpreter import Interpreter, run_file, run_source
from uvl.tokens import Token, TokenType
from uvl.types import NIL


def run(source):
    return Interpreter().run('test.uvl', source)


def test_last_statement_value_is_returned():
    assert run('let x = 1; x;') == 1.0
    assert run('(1 + 2) * 3;') == 9.0
    assert run('"a" + "b";') == 'ab'


def test_statements_without_value_return_nil():
    assert run('let x = 1;') is NIL
    assert run('{ 1; }') is NIL
    assert run('nil;') is NIL
    assert run('') is NIL


def test_println_returns_nil_and_prints_display_form(capsys):
    assert run('println 1 + 1;') is NIL
    assert capsys.readouterr().out == '2\n'


def test_redeclaration_in_same_scope():
    with pytest.raises(UvlNameError) as exc:
        run('let x = 1;\nlet x = 2;')
    assert str(exc.value) == "File \"test.uvl\", line 2, in <root>\n    Name 'x' has already been declared"


def test_redeclaration_is_checked_before_initializer():
    with pytest.raises(UvlNameError) as exc:
        run('let x = 1; let x = y;')
    assert 'already been declared' in str(exc.value)


def test_initializer_cannot_see_its_own_name():
    with pytest.raises(UvlNameError) as exc:
        run('let x = x;')
    assert str(exc.value).endswith("Name 'x' is not defined")


def test_undefined_variable():
    with pytest.raises(UvlNameError) as exc:
        run('1 +\nmissing;')
    assert str(exc.value) == "File \"test.uvl\", line 2, in <root>\n    Name 'missing' is not defined"


def test_assign_to_undefined_name():
    with pytest.raises(UvlNameError) as exc:
        run('x = 1;')
    assert str(exc.value).endswith("Name 'x' is not defined")


def test_assign_to_immutable_name():
    with pytest.raises(UvlNameError) as exc:
        run('let x = 1; x = 2;')
    assert str(exc.value).endswith("Name 'x' is immutable")


def test_immutability_is_checked_before_the_new_value():
    with pytest.raises(UvlNameError) as exc:
        run('let x = 1; x = y;')
    assert str(exc.value).endswith("Name 'x' is immutable")


def test_assignment_returns_previous_value():
    interp = Interpreter()
    assert interp.run('t', 'let mut x = 1; x = 2;') == 1.0
    assert interp.global_env.get('x').value == 2.0


def test_chained_assignment():
    interp = Interpreter()
    assert interp.run('t', 'let mut a = 1; let mut b = 2; a = b = 3;') == 1.0
    assert interp.global_env.get('a').value == 2.0
    assert interp.global_env.get('b').value == 3.0


def test_assignment_returns_value_held_before_right_side_ran():
    interp = Interpreter()
    assert interp.run('t', 'let mut x = 1; x = x = 5;') == 1.0
    assert interp.global_env.get('x').value == 1.0


def test_block_shadowing_and_scope_exit():
    interp = Interpreter()
    interp.run('t', 'let x = 1; { let x = 2; let y = 3; }')
    assert interp.global_env.get('x').value == 1.0
    assert interp.global_env.get('y') is None


def test_block_assignment_updates_outer_binding():
    interp = Interpreter()
    interp.run('t', 'let mut x = 1; { x = 7; }')
    assert interp.global_env.get('x').value == 7.0


def test_name_declared_in_block_is_not_visible_after():
    with pytest.raises(UvlNameError):
        run('{ let y = 1; } y;')


def test_scope_is_restored_after_error_in_block():
    interp = Interpreter()
    with pytest.raises(UvlNameError):
        interp.run('t', 'let x = 1; { { let y = 2; y = 3; } }')
    assert interp.environment is interp.global_env


def test_mixed_operands():
    with pytest.raises(UnsupportedOperatorError) as exc:
        run('1 + "a";')
    assert str(exc.value).endswith(
        "Operator '+' is not supported for 1 of type Number and \"a\" of type String"
    )


def test_string_comparison_is_unsupported():
    with pytest.raises(UnsupportedOperatorError):
        run('"a" < "b";')


def test_unary_operators():
    assert run('-(2 + 3);') == -5.0
    assert run('--4;') == 4.0
    with pytest.raises(UnsupportedOperatorError):
        run('-"a";')
    with pytest.raises(UnsupportedOperatorError):
        run('!true;')


def test_equality():
    assert run('1 == 1;') is True
    assert run('1 == "1";') is False
    assert run('nil == nil;') is True
    assert run('true != false;') is True


def test_division_by_zero_is_a_runtime_error():
    with pytest.raises(UvlRuntimeError) as exc:
        run('1 / 0;')
    assert str(exc.value).endswith('Division by zero: 1/0')


def test_left_operand_error_is_reported_first():
    with pytest.raises(UvlNameError):
        run('missing + (1 / 0);')
    with pytest.raises(UvlRuntimeError):
        run('(1 / 0) + missing;')


def test_right_operand_error_is_reported():
    with pytest.raises(UvlRuntimeError):
        run('"a" + (1 / 0);')


def test_output_before_error_is_kept(capsys):
    with pytest.raises(UvlNameError):
        run('println "before"; missing; println "after";')
    assert capsys.readouterr().out == '"before"\n'


def test_lex_and_parse_errors_are_raised_before_execution(capsys):
    with pytest.raises(LexError):
        run('println 1; @')
    with pytest.raises(ParseError):
        run('println 1; let;')
    assert capsys.readouterr().out == ''


def test_error_sets_flag_and_reset_clears_it():
    interp = Interpreter()
    with pytest.raises(UvlNameError):
        interp.run('t', 'missing;')
    assert interp.had_error
    interp.reset()
    assert not interp.had_error


def test_prompt_mode_session_keeps_declarations():
    interp = Interpreter(prompt_mode=True)
    assert interp.run('stdin', 'let mut a = 1') is NIL
    assert interp.run('stdin', 'a + 1') == 2.0
    assert interp.run('stdin', 'a = 5;') == 1.0
    assert interp.run('stdin', 'a') == 5.0


def test_prompt_mode_redeclaration_fails():
    interp = Interpreter(prompt_mode=True)
    interp.run('stdin', 'let a = 1')
    with pytest.raises(UvlNameError):
        interp.run('stdin', 'let a = 2')


def test_declarations_survive_an_error():
    interp = Interpreter(prompt_mode=True)
    interp.run('stdin', 'let a = 1')
    with pytest.raises(UvlNameError):
        interp.run('stdin', 'missing')
    interp.reset()
    assert interp.run('stdin', 'a') == 1.0


def test_debug_trace_written_to_file(tmp_path):
    debug_file = tmp_path / 'trace.txt'
    interp = Interpreter(debug_level=3, debug_file=str(debug_file))
    interp.run('t', 'let mut x = 1; x = 2; { x; }')
    interp.close()
    trace = debug_file.read_text(encoding='utf-8')
    assert 'run t:' in trace
    assert 'exec (let mut x 1)' in trace
    assert 'declare x (mut) = 1' in trace
    assert 'assign x = 2 (was 1)' in trace
    assert 'enter block at line 1' in trace


def test_debug_trace_records_errors(tmp_path):
    debug_file = tmp_path / 'trace.txt'
    interp = Interpreter(debug_level=1, debug_file=str(debug_file))
    with pytest.raises(UvlNameError):
        interp.run('t', 'missing;')
    interp.close()
    trace = debug_file.read_text(encoding='utf-8')
    assert "NameError: File \"t\", line 1, in <root>" in trace
    assert 'declare' not in trace


def test_debug_after_close_is_ignored(tmp_path, capsys):
    debug_file = tmp_path / 'trace.txt'
    interp = Interpreter(debug_level=1, debug_file=str(debug_file))
    interp.close()
    interp.debug('late message')
    assert capsys.readouterr().out == ''
    assert 'late message' not in debug_file.read_text(encoding='utf-8')


def test_deep_nesting_is_a_parse_error():
    interp = Interpreter()
    with pytest.raises(ParseError) as exc:
        interp.run('t', '(' * 500 + '1' + ')' * 500 + ';')
    assert str(exc.value).startswith('File "t", line 1, in <root>')
    assert str(exc.value).endswith('Maximum nesting depth exceeded')
    assert interp.had_error


def test_deep_tree_is_a_runtime_error():
    ctx = Context('t', 1)
    expr = Literal(ctx, Token(TokenType.NUMBER, '1', 1, 1.0))
    for _ in range(5000):
        expr = Grouping(ctx, expr)
    interp = Interpreter()
    with pytest.raises(UvlRuntimeError) as exc:
        interp.execute([ExpressionStmt(ctx, expr)])
    assert str(exc.value).endswith('Maximum nesting depth exceeded')
    assert interp.environment is interp.global_env
    assert interp.run('t', '1 + 1;') == 2.0


def test_no_debug_file_without_verbosity(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    interp = Interpreter()
    interp.run('t', 'let x = 1;')
    interp.close()
    assert not (tmp_path / 'debug.txt').exists()


def test_run_source():
    assert run_source('1 + 2;') == 3.0


def test_run_file(tmp_path, capsys):
    program = tmp_path / 'prog.uvl'
    program.write_text('let a = 2;\nprintln a * a;\na;\n', encoding='utf-8')
    assert run_file(str(program)) == 2.0
    assert capsys.readouterr().out == '4\n'


def test_run_file_reports_file_name(tmp_path):
    program = tmp_path / 'bad.uvl'
    program.write_text('\n\nmissing;\n', encoding='utf-8')
    with pytest.raises(UvlNameError) as exc:
        run_file(str(program))
    assert str(exc.value).startswith(f'File "{program}", line 3, in <root>')
