"""DTOs HTTP (pydantic, camelCase) de la API de reservas; sin lógica de negocio."""
