from ._gradient_descent import GradientDescentTrainer

__all__ = [
    GradientDescentTrainer.__name__,
]
