from polite_proxy.prompts.polite_rewrite import PROMPT_POLITE_REWRITE, build_rewrite_messages

__all__ = ["PROMPT_POLITE_REWRITE", "build_rewrite_messages"]
