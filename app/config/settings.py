import os
from dotenv import load_dotenv
from pathlib import Path

# Carrega o .env manualmente se estiver fora do Docker
if not os.getenv("RUNNING_IN_DOCKER"):
    dotenv_path = Path(__file__).resolve().parents[2] / ".env"
    load_dotenv(dotenv_path=dotenv_path)

# Conexão: DATABASE_URL tem prioridade (ex.: sqlite:// nos testes)
DATABASE_URL = os.getenv("DATABASE_URL")

DB_CONFIG = {
    'database': os.getenv('DB_NAME'),
    'user': os.getenv('DB_USER'),
    'password': os.getenv('DB_PASSWORD'),
    'host': os.getenv('DB_HOST'),
    'port': int(os.getenv('DB_PORT', 5432)),
}

# SSL do banco (opcional)
DB_SSL_MODE = os.getenv('DB_SSL_MODE')  # ex.: require, verify-ca, verify-full

# JWT / Segurança
SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

# CORS
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]
CORS_ALLOW_ALL = os.getenv("CORS_ALLOW_ALL", "false").lower() in ("1", "true", "yes")

# FastAPI / App
BASE_URL = os.getenv("BASE_URL", "")
ENABLE_DOCS = os.getenv("ENABLE_DOCS", "true").lower() in ("1", "true", "yes")

# Nominatim (busca de bairros/áreas para desenhar zonas)
NOMINATIM_BASE_URL = os.getenv("NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org")
NOMINATIM_USER_AGENT = os.getenv("NOMINATIM_USER_AGENT", "gas-entregas-api/1.0")
NOMINATIM_TIMEOUT_SECONDS = float(os.getenv("NOMINATIM_TIMEOUT_SECONDS", 10))

# Alcance padrão da busca de áreas
ZONA_BUSCA_ESCOPO_PADRAO = os.getenv("ZONA_BUSCA_ESCOPO_PADRAO", "Rio Verde, GO")
ZONA_BUSCA_LIMITES_PADRAO = {
    "south": float(os.getenv("ZONA_BUSCA_SUL", -18.347)),
    "north": float(os.getenv("ZONA_BUSCA_NORTE", -17.0898436)),
    "west": float(os.getenv("ZONA_BUSCA_OESTE", -51.7307464)),
    "east": float(os.getenv("ZONA_BUSCA_LESTE", -50.3568883)),
}
HUB_LATITUDE = float(os.getenv("HUB_LATITUDE", -17.7915))
HUB_LONGITUDE = float(os.getenv("HUB_LONGITUDE", -50.9197))

# Buscas de área guardadas em memória (as menos usadas saem primeiro)
ZONA_BUSCA_CACHE_MAX_ENTRADAS = int(os.getenv("ZONA_BUSCA_CACHE_MAX_ENTRADAS", 500))

# Entregadores
ENTREGADOR_OFFLINE_TIMEOUT_SECONDS = int(os.getenv("ENTREGADOR_OFFLINE_TIMEOUT_SECONDS", 45))
ENTREGADOR_POLLING_SECONDS = float(os.getenv("ENTREGADOR_POLLING_SECONDS", 3))

# Base da API usada pelo poller do app do entregador
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
