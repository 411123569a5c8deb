from routestub.codegen.codegen import (
    Codegen,
    expand_handler,
    generate_rpc,
    transform_module,
    transform_source,
)

__all__ = [
    'Codegen',
    'expand_handler',
    'generate_rpc',
    'transform_module',
    'transform_source',
]
