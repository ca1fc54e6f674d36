"""Provider search core: parameter normalization, filter compilation, execution strategies, shaping."""
