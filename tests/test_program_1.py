from hackscript.interpreter import run_program


def test_program_1(example_source):
    result = run_program(example_source('program_1.hs'))
    assert result.success
    assert result.output == ['Hello World!!']
