# =============================================================================
# TESTES - Quiz Schemas
# =============================================================================
# Validação de definições de quiz na construção e helpers de autoria
# =============================================================================

import pytest


class TestAnswerOption:
    """Testes para AnswerOption."""

    def test_create_option(self):
        """Cria opção válida."""
        from quiz.models.schemas import AnswerOption

        option = AnswerOption(id="A", text="Hard hat", is_correct=True, explanation="PPE")

        assert option.id == "A"
        assert option.is_correct is True
        assert option.explanation == "PPE"

    def test_option_is_frozen(self):
        """Opção não pode ser alterada após construída."""
        from pydantic import ValidationError

        from quiz.models.schemas import AnswerOption

        option = AnswerOption(id="A", text="Hard hat")

        with pytest.raises(ValidationError):
            option.text = "Changed"

    def test_wrong_type_is_invalid_definition(self):
        """Tipo errado na construção direta vira InvalidDefinition."""
        from quiz.core.exceptions import InvalidDefinition
        from quiz.models.schemas import AnswerOption

        with pytest.raises(InvalidDefinition) as exc_info:
            AnswerOption(id="A", text="Hard hat", is_correct="sometimes")

        assert exc_info.value.details["errors"]


class TestQuestionValidation:
    """Testes para regras de validação de Question."""

    def test_valid_single_choice(self, single_choice_question):
        """Questão single-choice expõe a opção correta."""
        assert single_choice_question.correct_option_ids == frozenset({"B"})
        assert single_choice_question.option_ids == ("A", "B", "C")

    def test_choice_question_without_options(self):
        """Tipos de escolha exigem opções."""
        from quiz.core.exceptions import InvalidDefinition
        from quiz.models.enums import QuestionType
        from quiz.models.schemas import Question

        with pytest.raises(InvalidDefinition) as exc_info:
            Question(id="q1", type=QuestionType.SINGLE_CHOICE, text="Pick one", options=())

        assert exc_info.value.details["question_id"] == "q1"

    @pytest.mark.parametrize("correct_flags", [(False, False), (True, True)])
    def test_single_choice_requires_exactly_one_correct(self, correct_flags):
        """Zero ou duas opções corretas são rejeitadas."""
        from quiz.core.exceptions import InvalidDefinition
        from quiz.models.enums import QuestionType
        from quiz.models.schemas import AnswerOption, Question

        options = tuple(
            AnswerOption(id=str(i), text=f"Option {i}", is_correct=flag)
            for i, flag in enumerate(correct_flags)
        )

        with pytest.raises(InvalidDefinition):
            Question(id="q1", type=QuestionType.SINGLE_CHOICE, text="Pick one", options=options)

    def test_true_false_requires_exactly_one_correct(self):
        """True/false segue a regra do single-choice."""
        from quiz.core.exceptions import InvalidDefinition
        from quiz.models.enums import QuestionType
        from quiz.models.schemas import AnswerOption, Question

        with pytest.raises(InvalidDefinition):
            Question(
                id="q1",
                type=QuestionType.TRUE_FALSE,
                text="Sky is blue",
                options=(
                    AnswerOption(id="true", text="True", is_correct=True),
                    AnswerOption(id="false", text="False", is_correct=True),
                ),
            )

    def test_multi_choice_requires_a_correct_option(self):
        """Multi-choice precisa de pelo menos uma opção correta."""
        from quiz.core.exceptions import InvalidDefinition
        from quiz.models.enums import QuestionType
        from quiz.models.schemas import AnswerOption, Question

        with pytest.raises(InvalidDefinition):
            Question(
                id="q1",
                type=QuestionType.MULTI_CHOICE,
                text="Pick any",
                options=(AnswerOption(id="A", text="A"), AnswerOption(id="B", text="B")),
            )

    def test_multi_choice_allows_many_correct(self, multi_choice_question):
        """Várias opções corretas são aceitas em multi-choice."""
        assert multi_choice_question.correct_option_ids == frozenset({"A", "C"})

    @pytest.mark.parametrize("points", [0, -1])
    def test_points_must_be_positive(self, points):
        """Pontos zero ou negativos são rejeitados."""
        from quiz.core.exceptions import InvalidDefinition
        from quiz.models.enums import QuestionType
        from quiz.models.schemas import Question

        with pytest.raises(InvalidDefinition):
            Question(id="q1", type=QuestionType.FILL_IN_BLANK, text="Blank", points=points)

    def test_points_wrong_type_is_invalid_definition(self):
        """Construção direta com tipo errado levanta InvalidDefinition, não ValidationError."""
        from quiz.core.exceptions import InvalidDefinition
        from quiz.models.enums import QuestionType
        from quiz.models.schemas import Question

        with pytest.raises(InvalidDefinition) as exc_info:
            Question(id="q1", type=QuestionType.FILL_IN_BLANK, text="Blank", points="many")

        assert exc_info.value.code == "invalid_definition"
        assert exc_info.value.details["errors"][0]["loc"] == ("points",)

    def test_unknown_type_is_invalid_definition(self):
        """Tipo de questão desconhecido levanta InvalidDefinition."""
        from quiz.core.exceptions import InvalidDefinition
        from quiz.models.schemas import Question

        with pytest.raises(InvalidDefinition):
            Question(id="q1", type="essay", text="Write")

    def test_text_question_rejects_options(self):
        """Fill-in-blank não tem opções."""
        from quiz.core.exceptions import InvalidDefinition
        from quiz.models.enums import QuestionType
        from quiz.models.schemas import AnswerOption, Question

        with pytest.raises(InvalidDefinition):
            Question(
                id="q1",
                type=QuestionType.FILL_IN_BLANK,
                text="Blank",
                options=(AnswerOption(id="A", text="A", is_correct=True),),
            )

    def test_duplicate_option_ids(self):
        """Ids de opção devem ser únicos na questão."""
        from quiz.core.exceptions import InvalidDefinition
        from quiz.models.enums import QuestionType
        from quiz.models.schemas import AnswerOption, Question

        with pytest.raises(InvalidDefinition) as exc_info:
            Question(
                id="q1",
                type=QuestionType.SINGLE_CHOICE,
                text="Pick one",
                options=(
                    AnswerOption(id="A", text="A", is_correct=True),
                    AnswerOption(id="A", text="Also A"),
                ),
            )

        assert exc_info.value.details["option_ids"] == ["A"]


class TestQuestionAuthoring:
    """Testes para edição de opções de uma questão."""

    def test_add_option(self, single_choice_question):
        """Adicionar opção retorna nova questão com a opção no final."""
        from quiz.models.schemas import AnswerOption

        revised = single_choice_question.add_option(AnswerOption(id="D", text="25"))

        assert revised.option_ids == ("A", "B", "C", "D")
        assert single_choice_question.option_ids == ("A", "B", "C")

    def test_add_duplicate_option(self, single_choice_question):
        """Opção com id repetido é rejeitada."""
        from quiz.core.exceptions import InvalidDefinition
        from quiz.models.schemas import AnswerOption

        with pytest.raises(InvalidDefinition):
            single_choice_question.add_option(AnswerOption(id="A", text="Again"))

    def test_update_option(self, single_choice_question):
        """Atualiza texto de uma opção mantendo a posição."""
        revised = single_choice_question.update_option("C", text="Twenty-one")

        assert revised.option("C").text == "Twenty-one"
        assert revised.option_ids == ("A", "B", "C")
        assert single_choice_question.option("C").text == "21"

    def test_remove_option(self, multi_choice_question):
        """Remove opção existente."""
        revised = multi_choice_question.remove_option("B")

        assert revised.option_ids == ("A", "C")

    def test_remove_last_correct_option(self, single_choice_question):
        """Remover a única correta deixa a questão inválida."""
        from quiz.core.exceptions import InvalidDefinition

        with pytest.raises(InvalidDefinition):
            single_choice_question.remove_option("B")

    def test_unknown_option(self, single_choice_question):
        """Opção desconhecida levanta InvalidDefinition com o id."""
        from quiz.core.exceptions import InvalidDefinition

        with pytest.raises(InvalidDefinition) as exc_info:
            single_choice_question.remove_option("Z")

        assert exc_info.value.details["option_id"] == "Z"

    def test_set_correct_single(self, single_choice_question):
        """Trocar a correta de single-choice desmarca a anterior."""
        revised = single_choice_question.set_correct_options("A")

        assert revised.correct_option_ids == frozenset({"A"})
        assert single_choice_question.correct_option_ids == frozenset({"B"})

    def test_set_correct_single_rejects_many(self, single_choice_question):
        """Single-choice não aceita duas corretas."""
        from quiz.core.exceptions import InvalidDefinition

        with pytest.raises(InvalidDefinition):
            single_choice_question.set_correct_options("A", "B")

    def test_set_correct_multi(self, multi_choice_question):
        """Multi-choice aceita qualquer conjunto não vazio."""
        revised = multi_choice_question.set_correct_options("A", "B", "C")

        assert revised.correct_option_ids == frozenset({"A", "B", "C"})


class TestQuizConfiguration:
    """Testes para QuizConfiguration."""

    def test_defaults(self):
        """Configuração padrão é sem tempo limite e com uma tentativa."""
        from quiz.models.schemas import QuizConfiguration

        config = QuizConfiguration(title="Quiz")

        assert config.time_limit_minutes is None
        assert config.time_limit_seconds is None
        assert config.max_attempts == 1

    def test_time_limit_seconds(self):
        """Minutos são convertidos para segundos."""
        from quiz.models.schemas import QuizConfiguration

        config = QuizConfiguration(title="Quiz", time_limit_minutes=2)

        assert config.time_limit_seconds == 120

    @pytest.mark.parametrize("passing_score", [-1, 101])
    def test_passing_score_out_of_range(self, passing_score):
        """passing_score deve ficar entre 0 e 100."""
        from quiz.core.exceptions import InvalidDefinition
        from quiz.models.schemas import QuizConfiguration

        with pytest.raises(InvalidDefinition) as exc_info:
            QuizConfiguration(title="Quiz", passing_score=passing_score)

        assert exc_info.value.code == "invalid_definition"

    def test_passing_score_wrong_type(self):
        """Tipo errado na construção direta levanta InvalidDefinition."""
        from quiz.core.exceptions import InvalidDefinition
        from quiz.models.schemas import QuizConfiguration

        with pytest.raises(InvalidDefinition):
            QuizConfiguration(title="Quiz", passing_score="eighty")

    @pytest.mark.parametrize(
        "field,value",
        [("max_attempts", 0), ("time_limit_minutes", 0), ("random_pool_size", 0)],
    )
    def test_invalid_limits(self, field, value):
        """Limites devem ser positivos."""
        from quiz.core.exceptions import InvalidDefinition
        from quiz.models.schemas import QuizConfiguration

        with pytest.raises(InvalidDefinition):
            QuizConfiguration(title="Quiz", **{field: value})

    def test_blank_title(self):
        """Título não pode ser vazio."""
        from quiz.core.exceptions import InvalidDefinition
        from quiz.models.schemas import QuizConfiguration

        with pytest.raises(InvalidDefinition):
            QuizConfiguration(title="   ")


class TestQuizDefinition:
    """Testes para QuizDefinition."""

    def test_accessors(self, sample_definition):
        """Acessores refletem as questões."""
        assert sample_definition.question_count == 4
        assert sample_definition.total_points == 5
        assert sample_definition.question_ids == ("q-single", "q-multi", "q-tf", "q-fill")
        assert sample_definition.question("q-tf").text.startswith("Incidents")

    def test_unknown_question(self, sample_definition):
        """Buscar questão inexistente levanta UnknownQuestion."""
        from quiz.core.exceptions import UnknownQuestion

        with pytest.raises(UnknownQuestion):
            sample_definition.question("missing")

    def test_requires_questions(self, sample_configuration):
        """Quiz precisa de pelo menos uma questão."""
        from quiz.core.exceptions import InvalidDefinition
        from quiz.models.schemas import QuizDefinition

        with pytest.raises(InvalidDefinition):
            QuizDefinition(id="empty", configuration=sample_configuration, questions=())

    def test_duplicate_question_ids(self, sample_configuration, single_choice_question):
        """Ids de questão devem ser únicos."""
        from quiz.core.exceptions import InvalidDefinition
        from quiz.models.schemas import QuizDefinition

        with pytest.raises(InvalidDefinition):
            QuizDefinition(
                id="dup",
                configuration=sample_configuration,
                questions=(single_choice_question, single_choice_question),
            )

    def test_direct_construction_wrong_type(self, sample_configuration):
        """Construção direta com questões de tipo errado levanta InvalidDefinition."""
        from quiz.core.exceptions import InvalidDefinition
        from quiz.models.schemas import QuizDefinition

        with pytest.raises(InvalidDefinition):
            QuizDefinition(id="bad", configuration=sample_configuration, questions="q1")

    def test_from_dict(self):
        """Dados de autoria viram uma definição."""
        from quiz.models.enums import QuestionType
        from quiz.models.schemas import QuizDefinition

        definition = QuizDefinition.from_dict(
            {
                "id": "from-dict",
                "configuration": {"title": "Dict Quiz", "passing_score": 70},
                "questions": [
                    {
                        "id": "q1",
                        "type": "true_false",
                        "text": "Water is wet",
                        "options": [
                            {"id": "t", "text": "True", "is_correct": True},
                            {"id": "f", "text": "False"},
                        ],
                    }
                ],
            }
        )

        assert definition.questions[0].type == QuestionType.TRUE_FALSE
        assert definition.configuration.passing_score == 70

    def test_from_dict_type_error_is_invalid_definition(self):
        """Erros de tipo do pydantic aparecem como InvalidDefinition."""
        from quiz.core.exceptions import InvalidDefinition
        from quiz.models.schemas import QuizDefinition

        with pytest.raises(InvalidDefinition) as exc_info:
            QuizDefinition.from_dict(
                {
                    "id": "bad",
                    "configuration": {"title": "Bad", "passing_score": "eighty"},
                    "questions": [],
                }
            )

        assert "errors" in exc_info.value.details

    def test_revise_returns_new_definition(self, sample_definition):
        """Revisar gera nova definição sem tocar na original."""
        revised = sample_definition.revise(
            configuration={"title": "Revised", "passing_score": 50}
        )

        assert revised is not sample_definition
        assert revised.configuration.title == "Revised"
        assert sample_definition.configuration.title == "Workplace Safety Basics"

    def test_revise_is_validated(self, sample_definition):
        """Revisões passam pela mesma validação."""
        from quiz.core.exceptions import InvalidDefinition

        with pytest.raises(InvalidDefinition):
            sample_definition.revise(configuration={"title": "Revised", "passing_score": 150})

    def test_definition_is_frozen(self, sample_definition):
        """Definição não pode ser alterada no lugar."""
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            sample_definition.id = "other"


class TestQuizDefinitionAuthoring:
    """Testes para helpers de autoria de QuizDefinition."""

    def test_add_question_at_end(self, sample_definition, scenario_question):
        """Adiciona questão no final por padrão."""
        revised = sample_definition.add_question(scenario_question)

        assert revised.question_ids[-1] == "q-scenario"
        assert revised.total_points == 10
        assert sample_definition.question_count == 4

    def test_add_question_at_index(self, sample_definition, scenario_question):
        """Adiciona questão numa posição específica."""
        revised = sample_definition.add_question(scenario_question, index=1)

        assert revised.question_ids == ("q-single", "q-scenario", "q-multi", "q-tf", "q-fill")

    def test_add_duplicate_question(self, sample_definition, single_choice_question):
        """Questão com id repetido é rejeitada."""
        from quiz.core.exceptions import InvalidDefinition

        with pytest.raises(InvalidDefinition):
            sample_definition.add_question(single_choice_question)

    def test_replace_question(self, sample_definition, single_choice_question):
        """Troca a questão mantendo a posição."""
        updated = single_choice_question.revise(points=3)

        revised = sample_definition.replace_question(updated)

        assert revised.question_ids == sample_definition.question_ids
        assert revised.question("q-single").points == 3
        assert revised.total_points == 7

    def test_replace_unknown_question(self, sample_definition, scenario_question):
        """Trocar questão inexistente levanta UnknownQuestion."""
        from quiz.core.exceptions import UnknownQuestion

        with pytest.raises(UnknownQuestion):
            sample_definition.replace_question(scenario_question)

    def test_remove_question(self, sample_definition):
        """Remove questão existente."""
        revised = sample_definition.remove_question("q-multi")

        assert revised.question_ids == ("q-single", "q-tf", "q-fill")
        assert revised.total_points == 3

    def test_remove_last_question(self, sample_configuration, single_choice_question):
        """Remover a única questão deixa o quiz inválido."""
        from quiz.core.exceptions import InvalidDefinition
        from quiz.models.schemas import QuizDefinition

        definition = QuizDefinition(
            id="single", configuration=sample_configuration, questions=(single_choice_question,)
        )

        with pytest.raises(InvalidDefinition):
            definition.remove_question("q-single")

    def test_move_question(self, sample_definition):
        """Move questão para outra posição."""
        revised = sample_definition.move_question("q-fill", 0)

        assert revised.question_ids == ("q-fill", "q-single", "q-multi", "q-tf")

    def test_move_question_clamped(self, sample_definition):
        """Índice fora do intervalo é limitado às extremidades."""
        revised = sample_definition.move_question("q-single", 99)

        assert revised.question_ids == ("q-multi", "q-tf", "q-fill", "q-single")

    def test_move_unknown_question(self, sample_definition):
        """Mover questão inexistente levanta UnknownQuestion."""
        from quiz.core.exceptions import UnknownQuestion

        with pytest.raises(UnknownQuestion):
            sample_definition.move_question("missing", 0)
