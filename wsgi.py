# ==============================================================================
# WSGI Entry Point - Para Gunicorn en producción
# ==============================================================================
# USO:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# ESTRUCTURA DEL PROYECTO:
#   repo_root/
#   ├── wsgi.py          <- Este archivo
#   ├── pyproject.toml
#   └── mercado_jaci/    <- Paquete Python
#       ├── main.py      <- create_app()
#       ├── services/
#       ├── repositories/
#       └── templates/
# ==============================================================================

import os

from mercado_jaci.main import create_app

app = create_app()

# ==============================================================================
# PUNTO DE ENTRADA
# ==============================================================================
# Para desarrollo local:
#   python wsgi.py
# ==============================================================================

if __name__ == '__main__':
    DEBUG = os.environ.get('FLASK_DEBUG', '0') == '1'
    HOST = os.environ.get('FLASK_HOST', '0.0.0.0')
    PORT = int(os.environ.get('FLASK_PORT', 5000))

    if not DEBUG:
        print(f"\n{'='*50}")
        print(f"  Jaci Supermercados en http://{HOST}:{PORT}")
        print(f"  Acceso local: http://localhost:{PORT}")
        print(f"{'='*50}\n")

    app.run(host=HOST, port=PORT, debug=DEBUG)
