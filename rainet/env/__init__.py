from .gym_env import RaiNetEnv

__all__ = ["RaiNetEnv"]
