from .prediction import PredictionResult, PredictionService, predict, predict_many

__all__ = ['PredictionResult', 'PredictionService', 'predict', 'predict_many']
