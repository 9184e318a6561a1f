# Retail Cart Service
# FastAPI adapter around the cart engine
