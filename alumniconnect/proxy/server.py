"""Mentorship credential proxy.

Forwards mentorship requests to the ticketing table API with the service
account's Basic-Auth credentials and relays the upstream answer.

Usage:
    python -m alumniconnect.proxy.server
"""
import base64
import logging
from typing import Any

import httpx
import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from alumniconnect.core import config
from alumniconnect.core.http_client import get_http_client

logger = logging.getLogger(__name__)

PROXY_FAILURE = {'error': 'Proxy failure'}

app = FastAPI(title='AlumniConnect mentorship proxy')

app.add_middleware(
    CORSMiddleware,
    allow_origins=['*'],
    allow_methods=['*'],
    allow_headers=['*'],
)


def build_basic_auth_header(username: str, password: str) -> str:
    credentials = base64.b64encode(f'{username}:{password}'.encode('utf-8')).decode('ascii')
    return f'Basic {credentials}'


async def forward_to_ticketing(client: httpx.AsyncClient, payload: Any) -> tuple[int, Any]:
    response = await client.post(
        config.MENTORSHIP_UPSTREAM_URL,
        json=payload,
        headers={
            'Content-Type': 'application/json',
            'Authorization': build_basic_auth_header(
                config.MENTORSHIP_UPSTREAM_USERNAME,
                config.MENTORSHIP_UPSTREAM_PASSWORD,
            ),
        },
    )
    return response.status_code, response.json()


@app.post('/mentorship')
async def mentorship(request: Request, client: httpx.AsyncClient = Depends(get_http_client)):
    try:
        payload = await request.json()
        status_code, body = await forward_to_ticketing(client, payload)
    except Exception:
        logger.exception('Proxy error')
        return JSONResponse(status_code=500, content=PROXY_FAILURE)
    return JSONResponse(status_code=status_code, content=body)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    config.validate_proxy_config()
    logger.info('Proxy listening on http://localhost:%s', config.PORT)
    uvicorn.run(app, host='0.0.0.0', port=config.PORT)


if __name__ == '__main__':
    main()
