from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Addressing settings
    default_namespace: str = "vault"
    max_slug_length: int = 50
    max_collision_attempts: int = 99

    # Relation index settings
    default_relation_limit: int = 5
    candidate_limit: int = 10
    bridge_threshold: float = 0.3
    full_graph_max_artifacts: int = 25

    # Search settings
    max_path_length: int = 8
    max_search_paths: int = 50
    default_difficulty: float = 0.5
    default_time_required: float = 1.0  # hours
    time_cost_scale: float = 0.1

    # Personalization settings
    preparation_gap: float = 0.3
    acceleration_margin: float = 0.3

    # Cache settings
    cache_max_entries: int = 128

    log_level: str = "INFO"  # Can be DEBUG, INFO, WARNING, ERROR, CRITICAL


settings = Settings()
