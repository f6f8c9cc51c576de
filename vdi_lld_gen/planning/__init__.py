"""Planning subpackage: address pools, entity generators and the orchestrator.

Each generator is a small module with its own unit tests; `orchestrator`
runs them in a fixed stage order. Import the orchestrator from
`vdi_lld_gen.planning.orchestrator` directly; this package init stays empty
because the allocator imports `planning.pool`.
"""
