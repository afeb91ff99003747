# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The embedding model seam.

The neural network is not part of this package. Anything that implements
EmbeddingModel can be plugged in, as long as it honors one contract:

    embed(batch) → (sequence_index, position_index, vector) for every id

one entry per id of every sequence, the [CLS]/[SEP] positions included,
in input order. The vectors are never looked at here, only routed.

TorchEmbeddingModel adapts an ordinary torch module (a BERT encoder, say)
to that contract. Loading its weights is the caller's business.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

import torch
import torch.nn as nn

from bertalign.annotation.models import EmbeddingVector
from bertalign.logging.logger import get_logger

logger: logging.Logger = get_logger(__name__)

EmbeddingOutput = tuple[int, int, EmbeddingVector]


class EmbeddingModel(ABC):
    """
    Base class for embedding model adapters.

    Implementations must be safe to call from several threads at once, or
    document that they aren't. Exceptions raised by `embed` reach the
    caller untouched.
    """

    @abstractmethod
    def embed(self, batch: Sequence[Sequence[int]]) -> Iterable[EmbeddingOutput]:
        """
        Produce one vector per id position.

        Args:
            batch: Sequences of ids, each [CLS] ... [SEP].

        Returns:
            (sequence_index, position_index, vector) triples covering every
            position of every sequence, in input order.
        """
        ...


def resolve_device(device_str: str) -> torch.device:
    """Map "auto" to CUDA when available, otherwise CPU; pass anything else to torch."""
    if device_str == "auto":
        if torch.cuda.is_available():
            return torch.device("cuda")
        return torch.device("cpu")
    return torch.device(device_str)


def _hidden_states(output: object) -> torch.Tensor:
    """
    Pull the [batch, seq_len, dim] tensor out of whatever the module returned:
    a bare tensor, a tuple whose first item is the tensor, or an output
    object with `last_hidden_state`.
    """
    if isinstance(output, torch.Tensor):
        return output
    last_hidden_state = getattr(output, "last_hidden_state", None)
    if isinstance(last_hidden_state, torch.Tensor):
        return last_hidden_state
    if isinstance(output, (tuple, list)) and output and isinstance(output[0], torch.Tensor):
        return output[0]
    raise TypeError(
        f"Cannot find hidden states in model output of type {type(output).__name__}"
    )


class TorchEmbeddingModel(EmbeddingModel):
    """
    Runs a torch encoder over a batch of id sequences.

    Sequences in a batch are right-padded with `pad_token_id` to the longest
    one, and an attention mask marks the real positions. Only real positions
    come back out, so padding never reaches the packer. Output that is not
    [batch, seq_len, dim] (pooled vectors, say) raises TypeError.

    Args:
        module: Encoder called as module(input_ids, attention_mask=mask),
                or module(input_ids) when use_attention_mask is False.
        pad_token_id: Id used for padding.
        device: "auto", "cpu", "cuda", "cuda:1", ...
        use_attention_mask: Whether the module takes an attention_mask kwarg.
    """

    def __init__(
        self,
        module: nn.Module,
        pad_token_id: int = 0,
        device: str = "auto",
        use_attention_mask: bool = True,
    ) -> None:
        self._device = resolve_device(device)
        self._module = module.to(self._device)
        self._module.eval()
        self._pad_token_id = pad_token_id
        self._use_attention_mask = use_attention_mask
        logger.info(
            "Torch embedding model ready",
            extra={"device": str(self._device), "pad_token_id": pad_token_id},
        )

    @property
    def device(self) -> torch.device:
        return self._device

    def _pad(self, batch: Sequence[Sequence[int]]) -> tuple[torch.Tensor, torch.Tensor]:
        longest = max(len(sequence) for sequence in batch)
        input_ids = torch.full((len(batch), longest), self._pad_token_id, dtype=torch.long)
        attention_mask = torch.zeros((len(batch), longest), dtype=torch.long)
        for row, sequence in enumerate(batch):
            input_ids[row, : len(sequence)] = torch.tensor(list(sequence), dtype=torch.long)
            attention_mask[row, : len(sequence)] = 1
        return input_ids.to(self._device), attention_mask.to(self._device)

    @torch.no_grad()
    def embed(self, batch: Sequence[Sequence[int]]) -> list[EmbeddingOutput]:
        if not batch:
            return []

        input_ids, attention_mask = self._pad(batch)
        if self._use_attention_mask:
            output = self._module(input_ids, attention_mask=attention_mask)
        else:
            output = self._module(input_ids)

        hidden = _hidden_states(output)
        if hidden.dim() != 3 or hidden.shape[0] != len(batch) or hidden.shape[1] < input_ids.shape[1]:
            raise TypeError(
                f"Expected hidden states of shape [{len(batch)}, >={input_ids.shape[1]}, dim], "
                f"got {list(hidden.shape)}"
            )
        hidden = hidden.float().cpu()

        results: list[EmbeddingOutput] = []
        for row, sequence in enumerate(batch):
            vectors = hidden[row, : len(sequence)].tolist()
            for position, vector in enumerate(vectors):
                results.append((row, position, vector))
        return results
