from ccpolicy import CachePolicy, CacheState, PolicyOptions, PolicyRegistry, get_policy, reset_policies


class CustomPolicy(CachePolicy): ...


def test_get_returns_shared_instance():
    registry = PolicyRegistry()

    assert registry.get() is registry.get(CachePolicy)
    assert registry.get(CustomPolicy) is not registry.get(CachePolicy)
    assert isinstance(registry.get(CustomPolicy), CustomPolicy)


def test_instances_use_registry_options():
    options = PolicyOptions(public_cache_mode="legacy")
    registry = PolicyRegistry(options)

    assert registry.get().options is options


def test_reset_starts_from_defaults():
    registry = PolicyRegistry()
    registry.get().disable_cache(force=True).set_max_age(60)

    registry.reset()
    policy = registry.get()

    assert policy.state is CacheState.ENABLED
    assert policy.forcing_level == 0
    assert policy.generate_cache_header_value() == "must-revalidate"


def test_register():
    registry = PolicyRegistry()
    policy = CachePolicy().private_cache()

    registry.register(policy)

    assert registry.get() is policy


def test_module_level_registry():
    reset_policies()
    get_policy().disable_cache(force=True)

    assert get_policy().state is CacheState.DISABLED

    reset_policies()

    assert get_policy().state is CacheState.ENABLED
    reset_policies()
