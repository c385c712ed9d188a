"""
Unit tests for set accumulator components

- test_primality.py: trial division and Miller-Rabin
- test_prime_generator.py: random primes and distinct prime pairs
- test_hash_to_prime.py: (value, nonce) to prime mapping
- test_store.py: in-memory and SQLite stores
- test_accumulator.py: add, witness and verification
- test_witness_refresh.py: witness maintenance
- test_rsa_params.py: parameter generation, validation and files
- test_config.py: settings and logging setup
"""
