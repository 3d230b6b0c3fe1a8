"""Mathematical utility functions for the MCP sandbox demo."""

import math


def circle_area(radius=1):
    """Calculate the area of a circle."""
    if radius < 0:
        raise ValueError("Radius cannot be negative")
    return math.pi * radius * radius


def fibonacci(count=10):
    """Generate the first ``count`` fibonacci numbers."""
    if count < 1:
        return []
    seq = [0, 1]
    for i in range(2, count):
        seq.append(seq[i - 1] + seq[i - 2])
    return seq[:count]


def compound_interest(principal, rate, time, compound=1):
    """Calculate compound interest.

    ``rate`` is the annual rate as a decimal, ``time`` is in years and
    ``compound`` is the number of compounding periods per year.
    """
    if principal < 0 or rate < 0 or time < 0 or compound < 1:
        raise ValueError("Invalid input parameters")
    return principal * (1 + rate / compound) ** (compound * time)


def is_prime(num=2):
    """Check if a number is prime."""
    if num < 2:
        return False
    if num == 2:
        return True
    if num % 2 == 0:
        return False
    for i in range(3, math.isqrt(num) + 1, 2):
        if num % i == 0:
            return False
    return True


# Convert degrees to radians
def degrees_to_radians(degrees=0):
    return degrees * (math.pi / 180)


def factorial(n=5):
    """Calculate the factorial of a number."""
    if n < 0:
        raise ValueError("Factorial not defined for negative numbers")
    if n in (0, 1):
        return 1
    return n * factorial(n - 1)
