"""
Tests package for the RSA set accumulator

- Unit tests: individual components in isolation
- Integration tests: complete add / witness / verify workflows
"""
