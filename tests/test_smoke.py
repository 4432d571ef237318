def test_package_imports():
    """Verify all submodules can be imported without errors."""
    import sourcemap_release
    import sourcemap_release.assets
    import sourcemap_release.cli
    import sourcemap_release.core
    import sourcemap_release.dispatcher
    import sourcemap_release.plugin
    import sourcemap_release.sentry

    assert sourcemap_release.MinimalSentryPlugin is not None
