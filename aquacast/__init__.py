"""
AquaCast Root Module

Historical consumption ingestion and forecast retraining service for a
metered water supply.

Layer Structure:
- Domain: entities, error taxonomy, pure dataset services and ports
- Application: use cases (upload, retrain, forecast, export, billing) and DTOs
- Infrastructure: MongoDB/GridFS persistence, InfluxDB and training-service
  gateways, workbook codec, in-memory retrain tracker
- Presentation: FastAPI routers
- Shared: logging bootstrap, enums and constants
- Main: composition root, configuration and entry point
"""
