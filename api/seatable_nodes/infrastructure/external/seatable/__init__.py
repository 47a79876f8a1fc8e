"""
Cliente del API HTTP de SeaTable.

- endpoints: expansión de plantillas ({{server}}, {{dtable_uuid}}, {{access_token}})
- context_builder: staging de credenciales, token de la base y metadata
- seatable_client: request único autenticado y paginación de filas
- http_executor: ejecutor HTTP por defecto (httpx)
"""
