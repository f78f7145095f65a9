"""AikScript FastAPI Server"""
