"""
Constantes del juego: parrilla de la temporada y sistema de puntos

Todo lo que se usa para calcular puntos vive aquí para no duplicarlo
entre el motor de gara, el de campeonato y los tests.
"""

# ==================== PILOTOS ====================
DRIVERS = [
    "Lando Norris",
    "Oscar Piastri",
    "Max Verstappen",
    "Charles Leclerc",
    "Lewis Hamilton",
    "George Russell",
    "Andrea Kimi Antonelli",
    "Yuki Tsunoda",
    "Fernando Alonso",
    "Lance Stroll",
    "Pierre Gasly",
    "Franco Colapinto",
    "Oliver Bearman",
    "Esteban Ocon",
    "Nico Hülkenberg",
    "Gabriel Bortoleto",
    "Liam Lawson",
    "Isack Hadjar",
    "Alexander Albon",
    "Carlos Sainz Jr.",
]

# ==================== CONSTRUCTORES ====================
CONSTRUCTORS = [
    "Red Bull",
    "Ferrari",
    "Mercedes",
    "McLaren",
    "Aston Martin",
    "Alpine",
    "Haas",
    "Sauber",
    "Vcarb",
    "Williams",
]

# Nombres que usa la API de resultados (Jolpica/Ergast) y que no coinciden
# con el nombre de la parrilla
DRIVER_ALIASES = {
    "Kimi Antonelli": "Andrea Kimi Antonelli",
    "Nico Hulkenberg": "Nico Hülkenberg",
    "Carlos Sainz": "Carlos Sainz Jr.",
    "Alex Albon": "Alexander Albon",
}

CONSTRUCTOR_ALIASES = {
    "Red Bull Racing": "Red Bull",
    "RB F1 Team": "Vcarb",
    "Racing Bulls": "Vcarb",
    "RB": "Vcarb",
    "Haas F1 Team": "Haas",
    "Alpine F1 Team": "Alpine",
    "Kick Sauber": "Sauber",
    "Sauber F1 Team": "Sauber",
}

# ==================== SISTEMA DE PUNTOS ====================
# Puntos por posición exacta en la carrera principal (también campeonato)
MAIN_POS_PTS = {1: 12, 2: 10, 3: 7}

# Puntos por posición exacta en la sprint
SPRINT_POS_PTS = {1: 8, 2: 6, 3: 4}

# Bonus jolly: el piloto termina en el podio, en cualquier posición
BONUS_JOLLY_MAIN = 5
BONUS_JOLLY_SPRINT = 2

# Formación vacía (no-show)
PENALTY_EMPTY_LIST = -3

# Formación enviada fuera de plazo
LATE_PENALTY = -3

# Regla especial: 29 puntos se redondean a 30 y regalan un jolly
ROUND_UP_FROM = 29
ROUND_UP_TO = 30

# Multiplicador de la última carrera de la temporada
DOUBLE_POINTS_FACTOR = 2

# Clave del ledger para los puntos de campeonato
CHAMPIONSHIP_KEY = "championship"
