from mercado_jaci import performance_logger
from mercado_jaci.performance_logger import get_function_stats, log_diagnostic, profile_function


def test_log_diagnostic_writes_tagged_line(isolated_logs, capsys):
    log_diagnostic('Erro ao buscar produtos', 'HTTP 500: boom')
    assert '[ERROR] Erro ao buscar produtos: HTTP 500: boom' in capsys.readouterr().out
    assert 'Erro ao buscar produtos: HTTP 500: boom' in (isolated_logs / 'errors.log').read_text(encoding='utf-8')


def test_profile_function_counts_calls_when_enabled():
    @profile_function(name='Prueba: sumar')
    def sumar(a, b):
        return a + b

    assert sumar(1, 2) == 3
    assert 'Prueba: sumar' not in get_function_stats()

    performance_logger.configure(enabled=True)
    try:
        assert sumar(2, 2) == 4
        assert get_function_stats()['Prueba: sumar']['calls'] == 1
    finally:
        performance_logger.configure(enabled=False)


def test_route_timing_written_when_profiling_enabled(tmp_path, product_repo):
    from mercado_jaci.app_container import AppContainer
    from mercado_jaci.config import load_settings
    from mercado_jaci.main import create_app
    from mercado_jaci.repositories import MemoryKeyValueStore

    overrides = {'DATA_DIR': str(tmp_path / 'data'), 'LOGS_DIR': str(tmp_path / 'perf'), 'PROFILING': True}
    container = AppContainer(load_settings(overrides), product_repo=product_repo,
                             config_store=MemoryKeyValueStore())
    app = create_app(overrides, container=container)
    try:
        with app.test_client() as c:
            assert c.get('/').status_code == 200
        log = (tmp_path / 'perf' / 'performance.log').read_text(encoding='utf-8')
        assert 'Acción: Ver tienda' in log
        assert 'Usuario: cliente' in log
    finally:
        performance_logger.configure(enabled=False)


def test_route_timing_names_admin_user(tmp_path, product_repo):
    import re
    from mercado_jaci.app_container import AppContainer
    from mercado_jaci.config import load_settings
    from mercado_jaci.main import create_app
    from mercado_jaci.repositories import MemoryKeyValueStore

    overrides = {'DATA_DIR': str(tmp_path / 'data'), 'LOGS_DIR': str(tmp_path / 'perf'), 'PROFILING': True}
    container = AppContainer(load_settings(overrides), product_repo=product_repo,
                             config_store=MemoryKeyValueStore())
    app = create_app(overrides, container=container)
    try:
        with app.test_client() as c:
            html = c.get('/').get_data(as_text=True)
            token = re.search(r'name="csrf_token" value="([0-9a-f]+)"', html).group(1)
            c.post('/login', data={'user': 'admin', 'password': 'admin', 'csrf_token': token})
            c.get('/')
        log = (tmp_path / 'perf' / 'performance.log').read_text(encoding='utf-8')
        assert 'Usuario: admin' in log
    finally:
        performance_logger.configure(enabled=False)
