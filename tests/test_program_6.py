from hackscript.interpreter import run_program


def test_program_6_block_scope(example_source):
    result = run_program(example_source('program_6.hs'))
    assert result.success
    assert result.output == ['inner', '1', 'area: 12.56']
