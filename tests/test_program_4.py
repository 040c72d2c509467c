from hackscript.interpreter import run_program


def test_program_4_default_parameter(example_source):
    result = run_program(example_source('program_4.hs'))
    assert result.success
    assert result.output == ['Hi World', 'Hi HackScript']
