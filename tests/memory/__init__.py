"""
Memory safety tests for the FFI boundary.

Tests native memory ownership and lifecycle:
- Buffer ownership (every owned result freed exactly once)
- Error path cleanup (leak-on-failure prevention)
- Processor handle pairing (one spp_new, one spp_free)
"""
