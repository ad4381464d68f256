from .compare_models import LightGBMModel, ScratchGBDTModel, XGBoostModel, run_model_comparison

__all__ = ['LightGBMModel', 'ScratchGBDTModel', 'XGBoostModel', 'run_model_comparison']
