# wsgi.py: gunicorn "wsgi:app"
from werkzeug.middleware.proxy_fix import ProxyFix
from jobportal import create_app

app = create_app()
# one reverse proxy in front (X-Forwarded-For / -Proto / -Host)
app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)
