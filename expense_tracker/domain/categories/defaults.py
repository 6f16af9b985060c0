"""Catalog of categories created on first start."""

DEFAULT_CATEGORIES: list[dict] = [
    # Income
    {"name": "Salario", "kind": "income", "description": "Ingresos por trabajo", "color": "#4CAF50", "icon": "💼"},
    {"name": "Freelance", "kind": "income", "description": "Trabajos independientes", "color": "#2196F3", "icon": "💻"},
    {"name": "Inversiones", "kind": "income", "description": "Rendimientos de inversiones", "color": "#FF9800", "icon": "📈"},
    {"name": "Bonos", "kind": "income", "description": "Bonificaciones y premios", "color": "#9C27B0", "icon": "🎁"},
    {"name": "Otros ingresos", "kind": "income", "description": "Otros tipos de ingresos", "color": "#607D8B", "icon": "💰"},
    # Expense
    {"name": "Alimentación", "kind": "expense", "description": "Comida y bebidas", "color": "#F44336", "icon": "🍽️"},
    {"name": "Transporte", "kind": "expense", "description": "Transporte público, combustible, etc.", "color": "#FF5722", "icon": "🚗"},
    {"name": "Servicios", "kind": "expense", "description": "Electricidad, agua, internet, etc.", "color": "#795548", "icon": "🏠"},
    {"name": "Entretenimiento", "kind": "expense", "description": "Ocio y diversión", "color": "#E91E63", "icon": "🎬"},
    {"name": "Salud", "kind": "expense", "description": "Gastos médicos y farmacia", "color": "#009688", "icon": "🏥"},
    {"name": "Educación", "kind": "expense", "description": "Cursos, libros, etc.", "color": "#3F51B5", "icon": "📚"},
    {"name": "Ropa", "kind": "expense", "description": "Vestimenta y calzado", "color": "#673AB7", "icon": "👕"},
    {"name": "Hogar", "kind": "expense", "description": "Artículos para el hogar", "color": "#8BC34A", "icon": "🏡"},
    {"name": "Otros gastos", "kind": "expense", "description": "Gastos varios", "color": "#9E9E9E", "icon": "💸"},
]
