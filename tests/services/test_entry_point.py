"""Console entry point — serves the app through uvicorn with configured host/port."""

import community_rest.main as main_module


def test_run_serves_app_with_settings(monkeypatch):
    calls = []
    monkeypatch.setattr(
        main_module.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)),
    )
    main_module.run()
    assert calls == [(
        "community_rest.main:app",
        {
            "host": main_module.settings.host,
            "port": main_module.settings.port,
            "log_level": main_module.settings.log_level.lower(),
        },
    )]
